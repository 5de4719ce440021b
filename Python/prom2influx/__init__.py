"""Copy Prometheus history into InfluxDB."""
from .errors import (ConfigResolutionError, JobCancelled, MigrationError,
                     QueryError, RetriesExhaustedError, TransferError,
                     UnknownValueTypeError, WriteError)
from .migrator import DataMigration
from .models import MigrationSpec

__version__ = '0.1.0'

__all__ = [
    'ConfigResolutionError',
    'DataMigration',
    'JobCancelled',
    'MigrationError',
    'MigrationSpec',
    'QueryError',
    'RetriesExhaustedError',
    'TransferError',
    'UnknownValueTypeError',
    'WriteError',
]
