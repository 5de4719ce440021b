import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from .converter import value_to_influxdb
from .durations import format_rfc3339, parse_retention
from .errors import (ConfigResolutionError, JobCancelled, QueryError,
                     TransferError)
from .models import TimeWindow
from .prometheus import QUERY_TIMEOUT
from .writer import WindowWriter

logger = logging.getLogger(__name__)

# A window spans step * 60, so the default 1m step queries an hour at a time.
WINDOW_MULTIPLIER = 60
DEFAULT_STEP = timedelta(minutes=1)
#Checked in order, newer servers only report the second one
RETENTION_FLAGS = ('storage.tsdb.retention', 'storage.tsdb.retention.time')


def metric_names(metrics):
    """Split the comma delimited metric list.

    An empty list still yields a single job for the empty metric name.
    """
    if metrics == '':
        return ['']
    return metrics.split(',')


def iter_windows(start, end, step):
    """Yield consecutive windows from ``start`` until one reaches ``end``.

    The last window is not clamped and may end after ``end``.
    """
    size = step * WINDOW_MULTIPLIER
    window_start = start
    while window_start < end:
        window_end = window_start + size
        yield TimeWindow(window_start, window_end)
        window_start = window_end


def _utcnow():
    return datetime.now(timezone.utc)


##Moves every configured metric from Prometheus into InfluxDB
class DataMigration:
    def __init__(self, spec, prometheus, influxdb, clock=_utcnow):
        self.spec = spec
        self.prometheus = prometheus
        self.influxdb = influxdb
        self.clock = clock

    def get_retention(self):
        try:
            flags = self.prometheus.flags()
        except QueryError as e:
            raise ConfigResolutionError('could not read Prometheus flags: %s' % e) from e

        value = None
        for key in RETENTION_FLAGS:
            if flags.get(key) and flags[key] != '0s':
                value = flags[key]
                break
        if value is None:
            raise ConfigResolutionError('storage.tsdb.retention not found')
        try:
            return parse_retention(value)
        except ValueError as e:
            raise ConfigResolutionError('invalid retention %r: %s' % (value, e)) from e

    def resolve_spec(self):
        """Fill in every unset setting and return the settings the jobs run with."""
        spec = self.spec
        now = self.clock()
        end = spec.end or now
        step = spec.step or DEFAULT_STEP
        start = spec.start or now - self.get_retention()
        concurrency = spec.concurrency or 1

        if step < timedelta(0):
            raise ConfigResolutionError('step must be positive, got %s' % step)
        if concurrency < 0:
            raise ConfigResolutionError('concurrency must be positive, got %d' % concurrency)
        if end < start:
            raise ConfigResolutionError('end %s is before start %s' % (format_rfc3339(end), format_rfc3339(start)))
        return replace(spec, start=start, end=end, step=step, concurrency=concurrency)

    def migrate_metric(self, name, spec, cancelled=None):
        """Walk one metric window by window. Returns the number of windows."""
        writer = WindowWriter(self.influxdb, spec.retry)
        count = 0
        for window in iter_windows(spec.start, spec.end, spec.step):
            if cancelled is not None and cancelled.is_set():
                raise JobCancelled(name)
            logger.info('%s... %s %s', name, format_rfc3339(window.start), format_rfc3339(window.end))
            value, warnings = self.prometheus.query_range(
                name, window.start, window.end, spec.step, timeout=QUERY_TIMEOUT)
            for warning in warnings:
                logger.warning('%s: Prometheus warning: %s', name, warning)

            for bp in value_to_influxdb(name, spec.database, spec.monitor_label, spec.precision, value):
                writer.write(bp)
            count += 1
        return count

    def run_migration(self):
        """Migrate every metric, at most ``concurrency`` at a time.

        The first failing metric stops the others at their next window and
        no further metric is started. Raises TransferError once every
        started metric has finished.
        """
        spec = self.resolve_spec()
        names = metric_names(spec.metrics)
        logger.info('%s', json.dumps(spec.to_dict()))

        cancelled = threading.Event()
        failures = []
        lock = threading.Lock()

        def job(name):
            logger.info('start %s', name)
            try:
                windows = self.migrate_metric(name, spec, cancelled)
            except JobCancelled as e:
                logger.info('%s', e)
                with lock:
                    failures.append((name, e))
                return
            except Exception as e:
                logger.error('Problem with metric %s: %s', name, e)
                with lock:
                    failures.append((name, e))
                cancelled.set()
                return
            logger.info('done %s (%d windows)', name, windows)

        slots = threading.BoundedSemaphore(spec.concurrency)
        with ThreadPoolExecutor(max_workers=spec.concurrency, thread_name_prefix='prom2influx') as pool:
            for name in names:
                slots.acquire()
                if cancelled.is_set():
                    slots.release()
                    break
                future = pool.submit(job, name)
                future.add_done_callback(lambda _: slots.release())

        if failures:
            raise TransferError(failures) from failures[0][1]
