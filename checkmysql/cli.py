#!/usr/bin/env python3
#
# InnoGames Monitoring Plugins - check_mysql
#
# This check tests multiple MySQL server health metrics
#
# Usage examples:
#
#   check_mysql connection --warning 200 --critical 250
#   check_mysql --host db1 uptime --critical 600
#   check_mysql replication --name source2
#   check_mysql readonly on
#   check_mysql ping
#   check_mysql group-replication --local-hostname db1 -g
#
# For details see --help/-h for check_mysql and each check_name
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
import os
import socket
from argparse import (
    ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace,
    _SubParsersAction,
)
from pprint import pformat

from checkmysql import checks
from checkmysql.common import CheckResult, exit, unknown
from checkmysql.group_replication import check_group_replication
from checkmysql.source import MetricSourceError, MySQLSource

logging.basicConfig(
    format='%(levelname)-8s [%(filename)s:%(lineno)d] %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> Namespace:
    parser = ArgumentParser(formatter_class=ArgumentDefaultsHelpFormatter)
    parser.add_argument(
        '-v', '--verbose', action='count', default=0,
        help='set the script verbosity, could be used multiple',
    )
    parser.add_argument(
        '--host', default='localhost',
        help='target MySQL server, localhost means the unix socket',
    )
    parser.add_argument(
        '--port', default=3306, type=int, help='target MySQL port',
    )
    parser.add_argument(
        '--unix-socket', default='/var/run/mysqld/mysqld.sock',
        help='target unix socket',
    )
    parser.add_argument('-u', '--user', help='MySQL user')
    parser.add_argument(
        '-p', '--passwd', default=os.environ.get('MYSQL_PASSWORD'),
        help='MySQL password, taken from MYSQL_PASSWORD if not given',
    )
    parser.add_argument(
        '--defaults-file',
        help='MySQL option file to read the connection settings from',
    )
    parser.add_argument('--ssl-ca', help='CA certificate file')
    parser.add_argument('--ssl-cert', help='client certificate file')
    parser.add_argument('--ssl-key', help='client private key file')
    parser.add_argument(
        '--connect-timeout', default=10, type=int,
        help='seconds to wait for the connection',
    )
    parser.add_argument(
        '--perfdata', action='store_true',
        help='include performance data in output',
    )

    subparsers = parser.add_subparsers(dest='check_name')
    subparsers.required = True

    add_subparser_connection(subparsers)
    add_subparser_uptime(subparsers)
    add_subparser_replication(subparsers)
    add_subparser_readonly(subparsers)
    add_subparser_ping(subparsers)
    add_subparser_group_replication(subparsers)

    return parser.parse_args(argv)


def add_subparser_connection(subparsers: _SubParsersAction):
    parser_connection = subparsers.add_parser(
        'connection', formatter_class=ArgumentDefaultsHelpFormatter,
        help='check the number of connected threads',
    )
    parser_connection.set_defaults(
        check=lambda source, args: checks.check_connection(
            source, args.warning, args.critical,
        ),
    )
    parser_connection.add_argument(
        '-w', '--warning', type=int, default=250,
        help='warning when there are more connections than this',
    )
    parser_connection.add_argument(
        '-c', '--critical', type=int, default=280,
        help='critical when there are more connections than this',
    )


def add_subparser_uptime(subparsers: _SubParsersAction):
    parser_uptime = subparsers.add_parser(
        'uptime', formatter_class=ArgumentDefaultsHelpFormatter,
        help='check the server has not been restarted recently',
    )
    parser_uptime.set_defaults(
        check=lambda source, args: checks.check_uptime(
            source, args.warning, args.critical,
        ),
    )
    parser_uptime.add_argument(
        '-w', '--warning', type=int, default=0,
        help='warning when the server is up for less seconds than this',
    )
    parser_uptime.add_argument(
        '-c', '--critical', type=int, default=0,
        help='critical when the server is up for less seconds than this',
    )


def add_subparser_replication(subparsers: _SubParsersAction):
    parser_replication = subparsers.add_parser(
        'replication', formatter_class=ArgumentDefaultsHelpFormatter,
        help='check the replication threads are running and not behind',
    )
    parser_replication.set_defaults(
        check=lambda source, args: checks.check_replication(
            source, args.warning, args.critical,
            channel=args.name, replica_syntax=args.replica_syntax,
        ),
    )
    parser_replication.add_argument(
        '-w', '--warning', type=int, default=5,
        help='warning limit of seconds behind master',
    )
    parser_replication.add_argument(
        '-c', '--critical', type=int, default=10,
        help='critical limit of seconds behind master',
    )
    parser_replication.add_argument(
        '-n', '--name',
        help='name of the channel to check (for multi-source replication)',
    )
    parser_replication.add_argument(
        '--replica-syntax', action='store_true',
        help='use SHOW REPLICA STATUS, required from MySQL 8.4 on',
    )


def add_subparser_readonly(subparsers: _SubParsersAction):
    parser_readonly = subparsers.add_parser(
        'readonly', formatter_class=ArgumentDefaultsHelpFormatter,
        help='check the read_only variable has the expected value',
    )
    parser_readonly.set_defaults(
        check=lambda source, args: checks.check_readonly(
            source, args.expected,
        ),
    )
    parser_readonly.add_argument(
        'expected', type=str.lower, choices=['on', 'off'],
        help='expected read_only status',
    )


def add_subparser_ping(subparsers: _SubParsersAction):
    parser_ping = subparsers.add_parser(
        'ping', formatter_class=ArgumentDefaultsHelpFormatter,
        help='check the server accepts connections',
    )
    parser_ping.set_defaults(check=None)


def add_subparser_group_replication(subparsers: _SubParsersAction):
    parser_gr = subparsers.add_parser(
        'group-replication', formatter_class=ArgumentDefaultsHelpFormatter,
        help='check the state of the local group replication member, see '
        'performance_schema.replication_group_members',
    )
    parser_gr.set_defaults(
        check=lambda source, args: check_group_replication(
            source, args.local_hostname or socket.getfqdn(), args.local_port,
            args.group_members,
        ),
    )
    parser_gr.add_argument(
        '--local-hostname',
        help='local hostname as a group member (default: the FQDN)',
    )
    parser_gr.add_argument(
        '--local-port', default='3306',
        help='local port number as a group member',
    )
    parser_gr.add_argument(
        '-g', '--group-members', action='store_true',
        help='detect anomalies of other group members',
    )


def get_source(args: Namespace) -> MySQLSource:
    connection_kwargs = {'connection_timeout': args.connect_timeout}
    if args.host == 'localhost':
        connection_kwargs['unix_socket'] = args.unix_socket
    else:
        connection_kwargs['host'] = args.host
        connection_kwargs['port'] = args.port
    if args.user:
        connection_kwargs['user'] = args.user
        if args.passwd:
            connection_kwargs['passwd'] = args.passwd
    if args.defaults_file:
        connection_kwargs['option_files'] = args.defaults_file
    for key in ('ssl_ca', 'ssl_cert', 'ssl_key'):
        if getattr(args, key):
            connection_kwargs[key] = getattr(args, key)

    return MySQLSource(**connection_kwargs)


def run_check(args: Namespace) -> CheckResult:
    source = get_source(args)
    if args.check is None:
        try:
            return checks.check_ping(source)
        finally:
            source.close()

    try:
        with source:
            return args.check(source, args)
    except MetricSourceError as e:
        return unknown(str(e))


def main(argv=None):
    args = parse_args(argv)
    log_levels = [logging.CRITICAL, logging.WARN, logging.INFO, logging.DEBUG]
    logging.getLogger('checkmysql').setLevel(log_levels[min(args.verbose, 3)])
    logger.debug('Arguments are {}'.format(pformat(
        {k: v for k, v in vars(args).items() if k not in ('passwd', 'check')}
    )))

    result = run_check(args)
    logger.info('Result is {}'.format(result))
    exit(result, args.perfdata)


if __name__ == '__main__':
    main()
