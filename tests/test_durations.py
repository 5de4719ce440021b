from datetime import datetime, timedelta, timezone

import pytest

from prom2influx.durations import (format_rfc3339, parse_duration, parse_retention,
                                   parse_rfc3339)


@pytest.mark.parametrize('text,expected', [
    ('1m', timedelta(minutes=1)),
    ('1h30m', timedelta(hours=1, minutes=30)),
    ('2.5h', timedelta(hours=2, minutes=30)),
    ('300ms', timedelta(milliseconds=300)),
    ('0', timedelta(0)),
    ('-5s', timedelta(seconds=-5)),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize('text', ['', '15', '1d', 'h', '1h30', 'abc'])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_days_become_hours():
    assert parse_retention('15d') == timedelta(hours=360)
    assert parse_retention('360h') == timedelta(days=15)


def test_parse_rfc3339():
    expected = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert parse_rfc3339('2024-01-02T03:04:05Z') == expected
    assert parse_rfc3339('2024-01-02T05:04:05+02:00') == expected
    assert parse_rfc3339('2024-01-02T03:04:05.123456789Z') == expected.replace(microsecond=123456)
    assert parse_rfc3339('') is None


def test_parse_rfc3339_requires_offset():
    with pytest.raises(ValueError):
        parse_rfc3339('2024-01-02T03:04:05')


def test_format_rfc3339():
    assert format_rfc3339(datetime(2024, 1, 2, 3, 4, 5, 999, tzinfo=timezone.utc)) == '2024-01-02T03:04:05Z'
