import threading
from datetime import datetime, timedelta, timezone

import pytest

from prom2influx.errors import WriteError
from prom2influx.models import Matrix, MigrationSpec, SampleStream

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakePrometheus:
    """Answers every window with one single-sample series, or with ``result``."""

    def __init__(self, flags=None, result=None, error=None):
        self.flags_value = flags if flags is not None else {'storage.tsdb.retention': '15d'}
        self.result = result
        self.error = error
        self.calls = []
        self.lock = threading.Lock()

    def flags(self):
        return self.flags_value

    def query_range(self, query, start, end, step, timeout=60):
        with self.lock:
            self.calls.append((query, start, end, step, timeout))
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result, []
        return Matrix([SampleStream({'__name__': query, 'job': 'node'}, [(start, 1.0)])]), []


class FakeInfluxDB:
    def __init__(self, failures=0):
        self.failures = failures
        self.attempts = 0
        self.written = []
        self.lock = threading.Lock()

    def write(self, bp):
        with self.lock:
            self.attempts += 1
            if self.failures < 0 or self.attempts <= self.failures:
                raise WriteError('boom %d' % self.attempts, status_code=500)
            self.written.append(bp)


@pytest.fixture
def spec():
    return MigrationSpec(
        database='prometheus',
        start=T0,
        end=T0 + timedelta(hours=3),
        step=timedelta(minutes=1),
        concurrency=1,
        retry=3,
        metrics='up',
    )


@pytest.fixture
def prometheus():
    return FakePrometheus()


@pytest.fixture
def influxdb():
    return FakeInfluxDB()
