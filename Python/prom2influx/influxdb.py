"""InfluxDB 1.x write side: line protocol over HTTP."""
import logging
import math

import requests
from influxdb.line_protocol import make_lines

from .errors import WriteError

logger = logging.getLogger(__name__)

#/write precision codes that make_lines spells differently
LINE_PRECISION = {'ns': 'n'}


def _finite(value):
    return not (isinstance(value, float) and (math.isnan(value) or math.isinf(value)))


def batch_lines(bp, precision='ns'):
    """Encode a batch as line protocol, or '' when nothing is left to write.

    Batch tags are merged over the point tags here, because make_lines lets
    point tags win. Fields that are NaN or infinite are dropped, InfluxDB
    cannot store them.
    """
    points = []
    for point in bp.points:
        fields = {key: value for key, value in point.fields.items() if _finite(value)}
        if not fields:
            logger.debug('Skipping point of %s without finite fields', point.measurement)
            continue
        tags = dict(point.tags)
        tags.update(bp.tags)
        entry = {'measurement': point.measurement, 'tags': tags, 'fields': fields}
        moment = point.time or bp.time
        if moment is not None:
            entry['time'] = moment
        points.append(entry)
    if not points:
        return ''
    return make_lines({'points': points}, precision=LINE_PRECISION.get(precision, precision))


class InfluxDBClient:
    def __init__(self, url, username='', password='', precision='ns', timeout=60, session=None):
        self.url = url.rstrip('/')
        self.username = username
        self.password = password
        self.precision = precision or 'ns'
        self.timeout = timeout
        self.session = session or requests.Session()

    def write(self, bp):
        """POST one batch to /write. Raises WriteError on any failure."""
        precision = bp.precision or self.precision
        body = batch_lines(bp, precision)
        if not body:
            return None
        params = {'db': bp.database, 'precision': precision}
        if self.username:
            params['u'] = self.username
            params['p'] = self.password
        try:
            response = self.session.post('%s/write' % self.url, params=params,
                                         data=body.encode('utf-8'), timeout=self.timeout)
        except requests.RequestException as e:
            raise WriteError('write to %s failed: %s' % (self.url, e)) from e

        if response.status_code // 100 != 2:
            reason = response.reason
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict) and payload.get('error'):
                reason = payload['error']
            raise WriteError('write to %s failed: %s %s' % (self.url, response.status_code, reason),
                             status_code=response.status_code)
        return response

    def __repr__(self):
        return 'InfluxDBClient(%r)' % (self.url,)
