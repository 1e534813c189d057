#
# InnoGames Monitoring Plugins - check_mysql database access
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
from typing import List

from mysql.connector import Error as MySQLError, connect

logger = logging.getLogger(__name__)


class MetricSourceError(Exception):
    """Base for everything that prevents a check from getting its data"""


class ConnectivityError(MetricSourceError):
    pass


class QueryError(MetricSourceError):
    pass


class IdentityResolutionError(MetricSourceError):
    pass


class MissingRowError(MetricSourceError):
    pass


class MySQLSource:
    """Single MySQL connection which returns query results as dicts

    Use it as a context manager, so that the connection is closed when
    the check is done.
    """

    def __init__(self, **connection_kwargs):
        self.connection_kwargs = connection_kwargs
        self.connection = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def connect(self):
        logger.debug('Connecting with {}'.format(', '.join(
            '{}={}'.format(k, v)
            for k, v in sorted(self.connection_kwargs.items())
            if k != 'passwd'
        )))
        # ValueError comes for unreadable option files and invalid
        # connection arguments
        try:
            self.connection = connect(**self.connection_kwargs)
        except (MySQLError, ValueError, OSError) as e:
            raise ConnectivityError("couldn't connect DB: {}".format(e)) from e

    def close(self):
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def query(self, statement: str, params: tuple = ()) -> List[dict]:
        """Return the results as a list of dicts"""
        if self.connection is None:
            raise ConnectivityError('not connected')
        logger.debug('Executing {} with {}'.format(statement.strip(), params))
        try:
            cursor = self.connection.cursor()
        except MySQLError as e:
            raise QueryError("couldn't execute query: {}".format(e)) from e
        try:
            cursor.execute(statement, params)
            if cursor.description is None:
                return []
            col_names = [desc[0] for desc in cursor.description]
            rows = [
                dict(zip(col_names, map(_decode, r)))
                for r in cursor.fetchall()
            ]
        except MySQLError as e:
            raise QueryError("couldn't execute query: {}".format(e)) from e
        finally:
            cursor.close()
        logger.debug('Got {} rows'.format(len(rows)))
        return rows


def _decode(value):
    if isinstance(value, (bytes, bytearray)):
        return value.decode('utf-8', 'replace')
    return value
