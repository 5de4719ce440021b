"""Read side: the Prometheus HTTP API."""
import logging
from datetime import datetime, timezone

import requests

from .errors import QueryError, UnknownValueTypeError
from .models import Matrix, Sample, SampleStream, Scalar, String, Vector

logger = logging.getLogger(__name__)

QUERY_TIMEOUT = 60  # seconds, per window


def _time(ts):
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


def parse_value(data):
    """Build a query result from the ``data`` member of an API response."""
    result_type = data.get('resultType')
    result = data.get('result')
    if result_type == 'matrix':
        return Matrix([
            SampleStream(
                metric=dict(stream.get('metric', {})),
                values=[(_time(ts), float(value)) for ts, value in stream.get('values', [])],
            )
            for stream in result
        ])
    if result_type == 'vector':
        return Vector([
            Sample(metric=dict(sample.get('metric', {})), timestamp=_time(sample['value'][0]),
                   value=float(sample['value'][1]))
            for sample in result
        ])
    if result_type == 'scalar':
        return Scalar(timestamp=_time(result[0]), value=float(result[1]))
    if result_type == 'string':
        return String(timestamp=_time(result[0]), value=str(result[1]))
    raise UnknownValueTypeError(result_type)


class PrometheusClient:
    def __init__(self, url, session=None):
        self.url = url.rstrip('/')
        self.session = session or requests.Session()

    def _get(self, path, params=None, timeout=QUERY_TIMEOUT):
        url = '%s%s' % (self.url, path)
        logger.debug('GET %s %s', url, params)
        try:
            response = self.session.get(url, params=params, timeout=timeout)
        except requests.RequestException as e:
            raise QueryError('request to %s failed: %s' % (url, e)) from e

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise QueryError('%s returned %s with a non JSON body' % (url, response.status_code))
        if body.get('status') != 'success' or response.status_code // 100 != 2:
            raise QueryError('%s returned %s: %s: %s' % (
                url, response.status_code, body.get('errorType', 'error'), body.get('error', response.reason)))
        return body

    def flags(self):
        """Command line flags of the Prometheus server, name to value."""
        body = self._get('/api/v1/status/flags')
        if not isinstance(body.get('data'), dict):
            raise QueryError('flags response from %s has no data' % self.url)
        return body['data']

    def query_range(self, query, start, end, step, timeout=QUERY_TIMEOUT):
        """Evaluate ``query`` over ``[start, end]``; returns ``(value, warnings)``."""
        params = {
            'query': query,
            'start': '%.3f' % start.timestamp(),
            'end': '%.3f' % end.timestamp(),
            'step': repr(step.total_seconds()),
            'timeout': '%ds' % timeout,
        }
        body = self._get('/api/v1/query_range', params=params, timeout=timeout)
        if not isinstance(body.get('data'), dict):
            raise QueryError('query_range response from %s has no data' % self.url)
        return parse_value(body['data']), body.get('warnings', [])

    def __repr__(self):
        return 'PrometheusClient(%r)' % (self.url,)
