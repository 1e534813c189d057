#
# InnoGames Monitoring Plugins - check_mysql thresholds
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
from enum import Enum

from checkmysql.common import Severity


class Direction(Enum):
    # Falling below the threshold is bad, e.g. uptime
    LOWER_BOUND_BAD = 'lower'
    # Exceeding the threshold is bad, e.g. connections or lag
    UPPER_BOUND_BAD = 'upper'


Threshold = collections.namedtuple(
    'Threshold', ['warning', 'critical', 'direction']
)


def evaluate(value, threshold: Threshold) -> Severity:
    """Classify a value against warning and critical limits

    Hitting a limit exactly does not trigger it.  The two limits are
    compared independently, so a critical limit that is looser than the
    warning one is taken as given.
    """
    if threshold.direction == Direction.LOWER_BOUND_BAD:
        if value < threshold.critical:
            return Severity.CRITICAL
        if value < threshold.warning:
            return Severity.WARNING
        return Severity.OK

    if value > threshold.critical:
        return Severity.CRITICAL
    if value > threshold.warning:
        return Severity.WARNING
    return Severity.OK


def format_duration(seconds):
    """Render seconds like 1d2h3m4s, leaving out leading zero units"""
    sign = '-' if seconds < 0 else ''
    seconds = abs(int(seconds))
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    if days:
        return '%s%dd%dh%dm%ds' % (sign, days, hours, minutes, seconds)
    if hours:
        return '%s%dh%dm%ds' % (sign, hours, minutes, seconds)
    if minutes:
        return '%s%dm%ds' % (sign, minutes, seconds)
    return '%s%ds' % (sign, seconds)
