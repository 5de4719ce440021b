from dotenv import load_dotenv
import os

from .influxdb import InfluxDBClient
from .prometheus import PrometheusClient

#------------ CONNECTION VARIABLES ------------#
#Credentials never come from the command line. Export them or put them in .env:
#INFLUX_USER / INFLUX_PWD - InfluxDB user, omit both if auth is disabled
#INFLUXDB_URL / PROMETHEUS_URL - used when the matching flag is not given


def load_env():
    load_dotenv()
    return {
        'influxdb_url': os.getenv('INFLUXDB_URL', ''),
        'prometheus_url': os.getenv('PROMETHEUS_URL', ''),
        'influx_user': os.getenv('INFLUX_USER', ''),
        'influx_password': os.getenv('INFLUX_PWD', ''),
    }


def connect_influxdb(url, precision, env=None):
    env = env if env is not None else load_env()
    if not url:
        raise ValueError('no InfluxDB URL given (--influxdb-url or INFLUXDB_URL)')
    return InfluxDBClient(
        url,
        username=env['influx_user'],
        password=env['influx_password'],
        precision=precision,
    )


def connect_prometheus(url):
    if not url:
        raise ValueError('no Prometheus URL given (--prometheus-url or PROMETHEUS_URL)')
    return PrometheusClient(url)
