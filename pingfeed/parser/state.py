# pingfeed/parser/state.py
from dataclasses import dataclass
from datetime import datetime


def localize(dt: datetime) -> datetime:
    """Naive datetimes are local wall time; give them the offset local zone rules assign."""
    return dt if dt.tzinfo is not None else dt.astimezone()


@dataclass
class ParserState:
    # Overwritten by every "[HH:MM:SS]" line. Not forced to move forward:
    # an out-of-order timestamp line simply sets it back.
    last_timestamp: datetime
