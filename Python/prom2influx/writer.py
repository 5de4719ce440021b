import logging

from .errors import RetriesExhaustedError

logger = logging.getLogger(__name__)


class WindowWriter:
    """Writes batches to InfluxDB, retrying each one up to ``retry`` times.

    Retries follow each other immediately. The writer does not look at what
    the sink raised, every failure is retried the same way.
    """

    def __init__(self, client, retry):
        self.client = client
        self.retry = max(retry, 0)

    def write(self, bp):
        """Returns the number of attempts it took."""
        last_error = None
        for attempt in range(1, self.retry + 2):
            try:
                self.client.write(bp)
                return attempt
            except Exception as e:
                last_error = e
                logger.warning('Write to %s failed (attempt %d/%d): %s',
                               bp.database, attempt, self.retry + 1, e)
        raise RetriesExhaustedError(self.retry + 1, last_error) from last_error
