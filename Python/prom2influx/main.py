# Main Migration File
import argparse
import logging
import sys
from datetime import timedelta

from . import connections
from .durations import parse_duration, parse_rfc3339
from .errors import MigrationError
from .migrator import DataMigration
from .models import PRECISIONS, MigrationSpec

logger = logging.getLogger(__name__)


def _timestamp(value):
    try:
        return parse_rfc3339(value)
    except ValueError:
        raise argparse.ArgumentTypeError('not an RFC3339 timestamp: %r' % value)


def _duration(value):
    try:
        return parse_duration(value)
    except ValueError:
        raise argparse.ArgumentTypeError('not a duration: %r' % value)


def build_parser(env):
    p = argparse.ArgumentParser(prog='prom2influx', description='Copy Prometheus history into InfluxDB')
    p.add_argument('--influxdb-url', default=env['influxdb_url'],
                   help='URL of the InfluxDB server to send samples to')
    p.add_argument('--prometheus-url', default=env['prometheus_url'],
                   help='URL of the Prometheus server to read samples from')
    p.add_argument('--monitor-label', default='codelab-monitor',
                   help='value of the "monitor" tag added to every point')
    p.add_argument('--influxdb.database', dest='database', default='prometheus',
                   help='InfluxDB database the samples are stored in')
    p.add_argument('--start', type=_timestamp, default=None,
                   help='RFC3339 start time, defaults to now minus the Prometheus retention')
    p.add_argument('--end', type=_timestamp, default=None, help='RFC3339 end time, defaults to now')
    p.add_argument('--step', type=_duration, default=timedelta(minutes=1),
                   help='query resolution; every query covers 60 steps')
    p.add_argument('--c', dest='concurrency', type=int, default=1, help='number of metrics migrated at once')
    p.add_argument('--retry', type=int, default=3, help='number of retries of a failed write')
    p.add_argument('--metrics', default='',
                   help='comma delimited list of metrics to migrate '
                        '(container_cpu_usage_seconds_total,kube_pod_container_resource_requests_cpu_cores)')
    p.add_argument('--precision', choices=PRECISIONS, default='ns', help='timestamp precision of the writes')
    p.add_argument('--log-level', default='INFO', choices=('DEBUG', 'INFO', 'WARNING', 'ERROR'))
    return p


def main(argv=None):
    env = connections.load_env()
    args = build_parser(env).parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()],
    )

    spec = MigrationSpec(
        database=args.database,
        start=args.start,
        end=args.end,
        step=args.step,
        monitor_label=args.monitor_label,
        concurrency=args.concurrency,
        retry=args.retry,
        precision=args.precision,
        metrics=args.metrics,
    )
    try:
        influxdb = connections.connect_influxdb(args.influxdb_url, args.precision, env)
        prometheus = connections.connect_prometheus(args.prometheus_url)
    except ValueError as e:
        logger.error('%s', e)
        return 2
    logger.info('Connection %r', influxdb)

    try:
        DataMigration(spec, prometheus, influxdb).run_migration()
    except MigrationError as e:
        logger.error('%s', e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
