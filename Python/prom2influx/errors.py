"""Error hierarchy for the migration engine.

Only a sink write failure is worth retrying. Everything else stops the run.
"""


class MigrationError(Exception):
    retriable = False


class ConfigResolutionError(MigrationError):
    """Start time, retention or another setting could not be resolved."""


class QueryError(MigrationError):
    """Prometheus was unreachable, rejected the query or timed out."""


class UnknownValueTypeError(MigrationError):
    """The query result is none of matrix, vector, scalar or string."""

    def __init__(self, value_type):
        super().__init__('unknown value type: %s' % (value_type,))
        self.value_type = value_type


class WriteError(MigrationError):
    """InfluxDB rejected a batch or could not be reached."""
    retriable = True

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class RetriesExhaustedError(MigrationError):
    def __init__(self, attempts, last_error):
        super().__init__('write failed after %d attempts: %s' % (attempts, last_error))
        self.attempts = attempts
        self.last_error = last_error


class JobCancelled(MigrationError):
    """A sibling job failed, so this one stopped before its next window."""

    def __init__(self, metric_name):
        super().__init__('migration of %r cancelled' % (metric_name,))
        self.metric_name = metric_name


class TransferError(MigrationError):
    """Aggregate failure of a run.

    ``failures`` lists ``(metric_name, error)`` pairs in the order the jobs
    failed. The first one is ``cause`` and is also chained as ``__cause__``.
    """

    def __init__(self, failures):
        self.failures = list(failures)
        self.cause = self.failures[0][1] if self.failures else None
        names = ', '.join(repr(name) for name, _ in self.failures)
        super().__init__('migration failed for %s: %s' % (names, self.cause))
