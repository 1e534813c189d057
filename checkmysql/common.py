#
# InnoGames Monitoring Plugins - check_mysql common definitions
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

import collections
import re
import sys
from enum import Enum

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f\u2028\u2029]+')


class Severity(Enum):
    """Enum for Nagios compatible exit codes

    OK, WARNING and CRITICAL are ordered by their values.  UNKNOWN is
    reported when nothing could be checked; it is not "worse" than
    CRITICAL, so it cannot be compared with the others.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    def __str__(self):
        return self.name


def most_severe(*severities):
    """Return the worst of the given OK/WARNING/CRITICAL severities"""
    if Severity.UNKNOWN in severities:
        raise ValueError('UNKNOWN cannot be ordered against other severities')
    return max(severities, key=lambda s: s.value)


class CheckResult(
    collections.namedtuple('CheckResult', ['severity', 'message', 'perfdata'])
):
    """Outcome of a single check

    The message is folded into one line.  Monitoring agents only take
    the first line of the output as the status text.
    """

    __slots__ = ()

    def __new__(cls, severity, message='', perfdata=()):
        message = _CONTROL_CHARS.sub(' ', str(message)).strip()
        return super().__new__(cls, severity, message, tuple(perfdata))

    def format(self, perfdata=False):
        message = self.message
        # People tend to interpret UNKNOWN status in different ways.
        # We are including a default message to avoid confusion.
        if self.severity == Severity.UNKNOWN and not message:
            message = 'Nothing could be checked'
        line = '{} {}'.format(self.severity, message).rstrip()
        if perfdata and self.perfdata:
            line += ' | ' + ' '.join(self.perfdata)
        return line


def ok(message, *perfdata):
    return CheckResult(Severity.OK, message, perfdata)


def critical(message, *perfdata):
    return CheckResult(Severity.CRITICAL, message, perfdata)


def unknown(message=''):
    return CheckResult(Severity.UNKNOWN, message)


def perfdata_item(label, value, warn='', crit='', uom=''):
    """Format one item as Nagios performance data: label=value[uom];w;c"""
    return '{}={}{};{};{}'.format(label, value, uom, warn, crit)


def exit(result, perfdata=False):
    """Exit procedure for the check commands"""
    print(result.format(perfdata))
    sys.exit(result.severity.value)
