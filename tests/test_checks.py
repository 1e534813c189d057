import pytest

from checkmysql import checks
from checkmysql.common import Severity
from checkmysql.source import ConnectivityError, QueryError


def status(name, value):
    return {'SHOW GLOBAL STATUS': [{'Variable_name': name, 'Value': value}]}


def replica_status(io='Yes', sql='Yes', lag=0, legacy=True):
    if legacy:
        row = {
            'Slave_IO_Running': io,
            'Slave_SQL_Running': sql,
            'Seconds_Behind_Master': lag,
        }
    else:
        row = {
            'Replica_IO_Running': io,
            'Replica_SQL_Running': sql,
            'Seconds_Behind_Source': lag,
        }
    return {'SHOW': [row]}


@pytest.mark.parametrize('value, expected', [
    ('10', Severity.OK),
    ('200', Severity.OK),
    ('201', Severity.WARNING),
    ('260', Severity.CRITICAL),
])
def test_connection(fake_source, value, expected):
    source = fake_source(status('Threads_connected', value))
    result = checks.check_connection(source, 200, 250)
    assert result.severity == expected
    assert result.message == '{} connections'.format(value)
    assert result.perfdata == ('connections={};200;250'.format(value),)
    assert source.queries == [
        ('SHOW GLOBAL STATUS LIKE %s', ('Threads_connected',)),
    ]


def test_connection_missing_row(fake_source):
    result = checks.check_connection(fake_source(), 200, 250)
    assert result.severity == Severity.UNKNOWN
    assert 'Threads_connected' in result.message


def test_connection_not_a_number(fake_source):
    source = fake_source(status('Threads_connected', 'many'))
    assert checks.check_connection(source, 200, 250).severity == (
        Severity.UNKNOWN
    )


def test_connection_query_error(fake_source):
    source = fake_source({'SHOW': QueryError("couldn't execute query")})
    result = checks.check_connection(source, 200, 250)
    assert result.severity == Severity.UNKNOWN
    assert result.message == "couldn't execute query"


@pytest.mark.parametrize('value, expected', [
    (30, Severity.CRITICAL),
    (600, Severity.WARNING),
    (3600, Severity.OK),
])
def test_uptime(fake_source, value, expected):
    source = fake_source(status('Uptime', value))
    result = checks.check_uptime(source, 3600, 600)
    assert result.severity == expected


def test_uptime_message(fake_source):
    result = checks.check_uptime(fake_source(status('Uptime', 93784)), 0, 0)
    assert result.severity == Severity.OK
    assert result.message == 'up 1d2h3m4s'
    assert result.perfdata == ('uptime=93784s;0;0',)


def test_replication_not_a_replica(fake_source):
    result = checks.check_replication(fake_source(), 5, 10)
    assert result.severity == Severity.OK
    assert result.message == 'MySQL is not a replica'


@pytest.mark.parametrize('io, sql', [('No', 'Yes'), ('Yes', 'No'),
                                     ('Connecting', 'Yes')])
def test_replication_stopped(fake_source, io, sql):
    source = fake_source(replica_status(io, sql, None))
    result = checks.check_replication(source, 5, 10)
    assert result.severity == Severity.CRITICAL
    assert result.message == 'MySQL replication has been stopped'


@pytest.mark.parametrize('lag, expected', [
    (0, Severity.OK),
    (5, Severity.OK),
    (6, Severity.WARNING),
    (10, Severity.WARNING),
    (11, Severity.CRITICAL),
])
def test_replication_lag(fake_source, lag, expected):
    result = checks.check_replication(fake_source(replica_status(lag=lag)), 5, 10)
    assert result.severity == expected
    assert result.message == (
        'MySQL replication behind master {} seconds'.format(lag)
    )


def test_replication_lag_unavailable(fake_source):
    source = fake_source(replica_status(lag=None))
    assert checks.check_replication(source, 5, 10).severity == (
        Severity.UNKNOWN
    )


def test_replication_replica_syntax(fake_source):
    source = fake_source(replica_status(lag=20, legacy=False))
    result = checks.check_replication(
        source, 5, 10, channel='source2', replica_syntax=True,
    )
    assert result.severity == Severity.CRITICAL
    assert source.queries[0][0] == (
        "SHOW REPLICA STATUS FOR CHANNEL 'source2'"
    )


def test_replication_invalid_channel(fake_source):
    source = fake_source(replica_status())
    result = checks.check_replication(source, 5, 10, channel="x'; DROP")
    assert result.severity == Severity.UNKNOWN
    assert source.queries == []


@pytest.mark.parametrize('value, expected, severity', [
    (1, 'on', Severity.OK),
    (0, 'off', Severity.OK),
    ('ON', 'on', Severity.OK),
    (0, 'on', Severity.CRITICAL),
    (1, 'off', Severity.CRITICAL),
])
def test_readonly(fake_source, value, expected, severity):
    source = fake_source({'SELECT @@global.read_only': [{'read_only': value}]})
    assert checks.check_readonly(source, expected).severity == severity


def test_readonly_message(fake_source):
    source = fake_source({'SELECT @@global.read_only': [{'read_only': 1}]})
    assert checks.check_readonly(source, 'off').message == (
        'the expected read_only status is off, but got on'
    )


def test_ping(fake_source):
    source = fake_source()
    result = checks.check_ping(source)
    assert result.severity == Severity.OK
    assert source.queries == [('SELECT 1', ())]


def test_ping_connect_fails(fake_source):
    source = fake_source(connect_error="couldn't connect DB: refused")
    result = checks.check_ping(source)
    assert result.severity == Severity.CRITICAL
    assert result.message == "couldn't connect DB: refused"


def test_ping_query_fails(fake_source):
    source = fake_source({'SELECT 1': ConnectivityError('gone away')})
    assert checks.check_ping(source).severity == Severity.CRITICAL
