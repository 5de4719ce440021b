import pytest

from prom2influx.errors import RetriesExhaustedError, WriteError
from prom2influx.models import BatchPoints
from prom2influx.writer import WindowWriter

from .conftest import FakeInfluxDB


@pytest.mark.parametrize('retry', [0, 1, 3])
def test_succeeds_on_last_allowed_attempt(retry):
    sink = FakeInfluxDB(failures=retry)
    attempts = WindowWriter(sink, retry).write(BatchPoints('db'))

    assert attempts == retry + 1
    assert sink.attempts == retry + 1
    assert len(sink.written) == 1


@pytest.mark.parametrize('retry', [0, 2, 5])
def test_gives_up_after_retry_plus_one_attempts(retry):
    sink = FakeInfluxDB(failures=-1)

    with pytest.raises(RetriesExhaustedError) as exc_info:
        WindowWriter(sink, retry).write(BatchPoints('db'))

    assert sink.attempts == retry + 1
    assert exc_info.value.attempts == retry + 1
    assert isinstance(exc_info.value.last_error, WriteError)
    assert exc_info.value.__cause__ is exc_info.value.last_error
    assert not exc_info.value.retriable


def test_stops_at_first_success():
    sink = FakeInfluxDB(failures=1)
    WindowWriter(sink, 10).write(BatchPoints('db'))
    assert sink.attempts == 2


def test_any_sink_error_is_retried():
    class FlakySink:
        calls = 0

        def write(self, bp):
            FlakySink.calls += 1
            if FlakySink.calls <= 2:
                raise ConnectionError('sink down')

    assert WindowWriter(FlakySink(), 3).write(BatchPoints('db')) == 3
    assert FlakySink.calls == 3


def test_last_non_write_error_is_chained():
    class BrokenSink:
        def write(self, bp):
            raise TypeError('bug')

    with pytest.raises(RetriesExhaustedError) as exc_info:
        WindowWriter(BrokenSink(), 2).write(BatchPoints('db'))
    assert exc_info.value.attempts == 3
    assert isinstance(exc_info.value.__cause__, TypeError)
