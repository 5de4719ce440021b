from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple, Union

EXTERNAL_LABEL_KEY = 'monitor'
PRECISIONS = ('ns', 'u', 'ms', 's', 'm', 'h')


@dataclass(frozen=True)
class MigrationSpec:
    """Configuration of one migration run, shared read-only by every job."""
    database: str = 'prometheus'
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    step: timedelta = timedelta(0)
    monitor_label: str = 'codelab-monitor'
    concurrency: int = 0
    retry: int = 3
    precision: str = 'ns'
    metrics: str = ''

    def to_dict(self):
        return {
            'Database': self.database,
            'Start': self.start.isoformat() if self.start else None,
            'End': self.end.isoformat() if self.end else None,
            'Step': self.step.total_seconds(),
            'C': self.concurrency,
            'Retry': self.retry,
            'MonitorLabel': self.monitor_label,
            'Precision': self.precision,
            'Metrics': self.metrics,
        }


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime


#------ Query results, one class per Prometheus resultType ------#

@dataclass
class SampleStream:
    metric: Dict[str, str]
    values: List[Tuple[datetime, float]]


@dataclass
class Sample:
    metric: Dict[str, str]
    timestamp: datetime
    value: float


@dataclass
class Matrix:
    series: List[SampleStream] = field(default_factory=list)


@dataclass
class Vector:
    samples: List[Sample] = field(default_factory=list)


@dataclass
class Scalar:
    timestamp: datetime
    value: float


@dataclass
class String:
    timestamp: datetime
    value: str


QueryResult = Union[Matrix, Vector, Scalar, String]


#------ InfluxDB write model ------#

@dataclass
class Point:
    measurement: str
    tags: Dict[str, str]
    fields: Dict[str, Union[float, str]]
    time: Optional[datetime] = None


@dataclass
class BatchPoints:
    """Points written to one database with a single ``/write`` call.

    Batch tags are stamped onto every point and win over a point tag of the
    same name. Points without a timestamp take the batch ``time``.
    """
    database: str
    points: List[Point] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    precision: str = ''
    time: Optional[datetime] = None
