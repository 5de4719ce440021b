from datetime import timedelta

from .errors import UnknownValueTypeError
from .models import (EXTERNAL_LABEL_KEY, BatchPoints, Matrix, Point, Scalar,
                     String, Vector)

# Scalar results are written 15 days before the instant Prometheus reports.
# Kept as-is so re-migrated data lands on the same timestamps as before.
SCALAR_BACKDATE = timedelta(days=15)


def metric_to_tags(metric):
    """Copy a label set into a fresh tag dict."""
    return {str(name): str(value) for name, value in metric.items()}


def value_to_influxdb(name, database, monitor_label, precision, value):
    """Turn one query result into the batches that have to be written.

    Matrix series keep their labels at batch level and every point only
    carries the external label. Vector samples carry the merged labels on
    the point itself, the external label overriding a series label of the
    same name.
    """
    def external_labels():
        return {EXTERNAL_LABEL_KEY: monitor_label}

    bps = []
    if isinstance(value, Matrix):
        for stream in value.series:
            bp = BatchPoints(database=database, tags=metric_to_tags(stream.metric), precision=precision)
            for timestamp, sample in stream.values:
                bp.points.append(Point(
                    measurement=name,
                    tags=external_labels(),
                    fields={'value': float(sample)},
                    time=timestamp,
                ))
            bps.append(bp)
    elif isinstance(value, Vector):
        bp = BatchPoints(database=database, precision=precision)
        for sample in value.samples:
            tags = metric_to_tags(sample.metric)
            tags.update(external_labels())
            bp.points.append(Point(
                measurement=name,
                tags=tags,
                fields={'value': float(sample.value)},
                time=sample.timestamp,
            ))
        bps.append(bp)
    elif isinstance(value, Scalar):
        bps.append(BatchPoints(
            database=database,
            points=[Point(
                measurement=name,
                tags=external_labels(),
                fields={'value': float(value.value)},
            )],
            precision=precision,
            time=value.timestamp - SCALAR_BACKDATE,
        ))
    elif isinstance(value, String):
        bps.append(BatchPoints(
            database=database,
            points=[Point(
                measurement=name,
                tags=external_labels(),
                fields={'value': str(value.value)},
            )],
            precision=precision,
            time=value.timestamp,
        ))
    else:
        raise UnknownValueTypeError(type(value).__name__)
    return bps
