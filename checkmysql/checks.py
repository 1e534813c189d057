#
# InnoGames Monitoring Plugins - check_mysql checks
#
# Copyright (c) 2026, InnoGames GmbH
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.  IN NO EVENT SHALL
# THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.
#

import logging
import re

from checkmysql.common import (
    CheckResult, critical, ok, perfdata_item, unknown,
)
from checkmysql.source import MetricSourceError, MissingRowError
from checkmysql.thresholds import Direction, Threshold, evaluate, format_duration

logger = logging.getLogger(__name__)

CHANNEL_NAME = re.compile(r'\A[A-Za-z0-9_-]+\Z')


def get_global_status(source, name):
    rows = source.query('SHOW GLOBAL STATUS LIKE %s', (name,))
    if not rows:
        raise MissingRowError('status variable {} not found'.format(name))
    return _to_number(name, rows[0]['Value'])


def _to_number(name, value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MissingRowError(
            '{} is not a number: {!r}'.format(name, value)
        ) from None


def check_connection(source, warn, crit) -> CheckResult:
    threshold = Threshold(warn, crit, Direction.UPPER_BOUND_BAD)
    try:
        connections = get_global_status(source, 'Threads_connected')
    except MetricSourceError as e:
        return unknown(str(e))

    return CheckResult(
        evaluate(connections, threshold),
        '{} connections'.format(connections),
        [perfdata_item('connections', connections, warn, crit)],
    )


def check_uptime(source, warn, crit) -> CheckResult:
    threshold = Threshold(warn, crit, Direction.LOWER_BOUND_BAD)
    try:
        uptime = get_global_status(source, 'Uptime')
    except MetricSourceError as e:
        return unknown(str(e))

    return CheckResult(
        evaluate(uptime, threshold),
        'up {}'.format(format_duration(uptime)),
        [perfdata_item('uptime', uptime, warn, crit, 's')],
    )


def _pick(row, *keys):
    """Return the first of the column names the server has used"""
    for key in keys:
        if key in row:
            return row[key]
    raise MissingRowError('none of {} in replica status'.format(keys))


def check_replication(
    source, warn, crit, channel=None, replica_syntax=False,
) -> CheckResult:
    threshold = Threshold(warn, crit, Direction.UPPER_BOUND_BAD)
    statement = 'SHOW REPLICA STATUS' if replica_syntax else 'SHOW SLAVE STATUS'
    if channel:
        if not CHANNEL_NAME.match(channel):
            return unknown('invalid channel name: {!r}'.format(channel))
        statement += " FOR CHANNEL '{}'".format(channel)

    try:
        rows = source.query(statement)
        if not rows:
            return ok('MySQL is not a replica')
        status = rows[0]
        io_running = _pick(status, 'Replica_IO_Running', 'Slave_IO_Running')
        sql_running = _pick(status, 'Replica_SQL_Running', 'Slave_SQL_Running')
        lag = _pick(status, 'Seconds_Behind_Source', 'Seconds_Behind_Master')
    except MetricSourceError as e:
        return unknown(str(e))

    logger.info('IO thread: {}, SQL thread: {}, lag: {}'.format(
        io_running, sql_running, lag
    ))
    if io_running != 'Yes' or sql_running != 'Yes':
        return critical('MySQL replication has been stopped')
    if lag is None:
        return unknown('replication delay is not available')

    try:
        lag = _to_number('Seconds_Behind_Master', lag)
    except MissingRowError as e:
        return unknown(str(e))

    return CheckResult(
        evaluate(lag, threshold),
        'MySQL replication behind master {} seconds'.format(lag),
        [perfdata_item('lag', lag, warn, crit, 's')],
    )


def _on_off(value):
    if str(value).lower() in ('1', 'on'):
        return 'on'
    return 'off'


def check_readonly(source, expected) -> CheckResult:
    try:
        rows = source.query('SELECT @@global.read_only AS read_only')
        if not rows:
            raise MissingRowError('read_only variable not found')
        got = _on_off(rows[0]['read_only'])
    except MetricSourceError as e:
        return unknown(str(e))

    if got != expected:
        return critical(
            'the expected read_only status is {}, but got {}'
            .format(expected, got)
        )
    return ok('read_only is {}'.format(got))


def check_ping(source) -> CheckResult:
    """Check the server is reachable at all

    Contrary to the other checks, failing to connect is the very thing
    this one reports, so it is CRITICAL rather than UNKNOWN.
    """
    try:
        source.connect()
        source.query('SELECT 1')
    except MetricSourceError as e:
        return critical(str(e))
    return ok('succeeded to connect DB')
