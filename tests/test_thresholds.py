import pytest

from checkmysql.common import Severity
from checkmysql.thresholds import (
    Direction, Threshold, evaluate, format_duration,
)

UPPER = Threshold(200, 250, Direction.UPPER_BOUND_BAD)
LOWER = Threshold(3600, 600, Direction.LOWER_BOUND_BAD)


@pytest.mark.parametrize('value, expected', [
    (0, Severity.OK),
    (199, Severity.OK),
    (200, Severity.OK),
    (201, Severity.WARNING),
    (250, Severity.WARNING),
    (251, Severity.CRITICAL),
    (260, Severity.CRITICAL),
    (200.5, Severity.WARNING),
])
def test_upper_bound(value, expected):
    assert evaluate(value, UPPER) == expected


@pytest.mark.parametrize('value, expected', [
    (86400, Severity.OK),
    (3600, Severity.OK),
    (3599, Severity.WARNING),
    (600, Severity.WARNING),
    (599, Severity.CRITICAL),
    (0, Severity.CRITICAL),
])
def test_lower_bound(value, expected):
    assert evaluate(value, LOWER) == expected


def test_inverted_thresholds_are_not_corrected():
    inverted = Threshold(300, 100, Direction.UPPER_BOUND_BAD)
    assert evaluate(150, inverted) == Severity.CRITICAL
    assert evaluate(50, inverted) == Severity.OK


def test_zero_thresholds_never_alert_on_uptime():
    assert evaluate(0, Threshold(0, 0, Direction.LOWER_BOUND_BAD)) == (
        Severity.OK
    )


@pytest.mark.parametrize('seconds, expected', [
    (0, '0s'),
    (59, '59s'),
    (61, '1m1s'),
    (3600, '1h0m0s'),
    (93784, '1d2h3m4s'),
    (-61, '-1m1s'),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected
