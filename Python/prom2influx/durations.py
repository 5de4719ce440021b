"""Duration and timestamp parsing for the command line and Prometheus flags.

Durations follow the Prometheus/Go syntax (``1h30m``, ``2.5h``, ``300ms``).
Retention values may also be whole days (``15d``), which are turned into
hours before parsing.
"""
import re
from datetime import datetime, timedelta, timezone

#Seconds per unit
_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'ms': 1e-3,
    's': 1,
    'm': 60,
    'h': 3600,
}
_COMPONENT_RE = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)')
_FRACTION_RE = re.compile(r'\.(\d+)')


def parse_duration(value):
    """Parse a Go style duration string into a timedelta."""
    text = value.strip()
    sign = 1
    if text[:1] in ('-', '+'):
        sign = -1 if text[0] == '-' else 1
        text = text[1:]
    if text == '0':
        return timedelta(0)
    if not text:
        raise ValueError('invalid duration %r' % (value,))

    seconds = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT_RE.match(text, pos)
        if not match:
            raise ValueError('invalid duration %r' % (value,))
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    return timedelta(seconds=sign * seconds)


def parse_retention(value):
    """Parse a retention flag such as ``15d`` or ``360h``."""
    text = value.strip()
    if text.endswith('d'):
        days = int(text[:-1])  # ValueError for anything but whole days
        text = '%dh' % (days * 24)
    return parse_duration(text)


def parse_rfc3339(value):
    """Parse an RFC3339 timestamp into an aware UTC datetime.

    An empty string means the bound is unset and gives None.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    # fromisoformat wants exactly six fractional digits on older interpreters
    text = _FRACTION_RE.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError('timestamp %r has no UTC offset' % (value,))
    return parsed.astimezone(timezone.utc)


def format_rfc3339(moment):
    return moment.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')
