# pingfeed/parser/extract.py
import re
from datetime import datetime
from typing import Optional

from loguru import logger

from pingfeed.errors import TimestampFormatError
from pingfeed.parser.classify import HOST_SIMPLE_RE, HOST_WITH_ADDRESS_RE, TIMESTAMP_RE, clean
from pingfeed.parser.state import localize
from pingfeed.schemas import LineKind

LOSS_RE = re.compile(r"xmt/rcv/%loss\s+=\s+(?P<xmt>\d+)/(?P<rcv>\d+)/(?P<loss>\d+)%,")
LATENCY_RE = re.compile(
    r"min/avg/max\s+=\s+(?P<min>\d+(?:\.\d+)?)/(?P<avg>\d+(?:\.\d+)?)/(?P<max>\d+(?:\.\d+)?)"
)

NO_LATENCY = (0.0, 0.0, 0.0)


def extract_timestamp(line: str, now: Optional[datetime] = None) -> datetime:
    """
    fping only prints the time of day, so the date comes from `now`, which
    defaults to the local clock at extraction time. A naive `now` is local
    wall time: the offset is the one local zone rules give the printed time,
    not the one in force when the line is read. An aware `now` keeps its tzinfo.
    """
    text = clean(line)
    m = TIMESTAMP_RE.match(text)
    if not m:
        raise TimestampFormatError(f"cannot find time in line: {text!r}", text)
    try:
        tod = datetime.strptime(m.group("time"), "%H:%M:%S").time()
    except ValueError as e:
        raise TimestampFormatError(f"cannot parse time in line: {text!r}, {e}", text) from e

    now = now or datetime.now()
    if now.tzinfo is None:
        ts = localize(datetime.combine(now.date(), tod))
    else:
        ts = datetime.combine(now.date(), tod, tzinfo=now.tzinfo)
    logger.debug("parsed time: {}", ts)
    return ts


def extract_host(line: str, kind: LineKind) -> str:
    text = clean(line)
    if kind == "host_with_address":
        m = HOST_WITH_ADDRESS_RE.match(text)
        host = f"{m.group('name')} ({m.group('address')})" if m else ""
    elif kind == "host_simple":
        m = HOST_SIMPLE_RE.match(text)
        host = m.group("name") if m else ""
    else:
        return ""
    logger.debug("parsed host: {!r}", host)
    return host


def extract_loss(line: str) -> int:
    m = LOSS_RE.search(line)
    if not m:
        return 0
    # the pattern only captures digits, so int() cannot fail
    loss = int(m.group("loss"))
    logger.debug("parsed loss percentage: {}", loss)
    return loss


def find_latencies(line: str) -> Optional[tuple[float, float, float]]:
    """(min, avg, max) in ms, or None when fping printed no latency clause."""
    m = LATENCY_RE.search(line)
    if not m:
        return None
    # digits with an optional fraction, always a valid float
    lat = (float(m.group("min")), float(m.group("avg")), float(m.group("max")))
    logger.debug("parsed min/avg/max: {}/{}/{}", *lat)
    return lat


def extract_latencies(line: str) -> tuple[float, float, float]:
    return find_latencies(line) or NO_LATENCY
