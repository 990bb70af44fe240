# pingfeed/parser/classify.py
import re

from pingfeed.schemas import LineKind

# "[14:03:07]"
TIMESTAMP_RE = re.compile(r"^\[(?P<time>\d\d:\d\d:\d\d)\]$")
# "localhost (::1)       : xmt/rcv/%loss = 10/10/0%, min/avg/max = 0.04/0.06/0.07"
HOST_WITH_ADDRESS_RE = re.compile(r"^(?P<name>[^ ]+)\s+\((?P<address>[^)]+)\)\s+:")
# "localhost : xmt/rcv/%loss = 10/10/0%, min/avg/max = 0.02/0.06/0.08"
HOST_SIMPLE_RE = re.compile(r"^(?P<name>[^ ]+)\s+:")

# First match wins; address lines are tried before simple host lines.
_RULES: tuple[tuple[LineKind, re.Pattern], ...] = (
    ("timestamp", TIMESTAMP_RE),
    ("host_with_address", HOST_WITH_ADDRESS_RE),
    ("host_simple", HOST_SIMPLE_RE),
)


def clean(line: str) -> str:
    return line.rstrip("\r\n").rstrip()


def classify(line: str) -> LineKind:
    text = clean(line)
    for kind, pattern in _RULES:
        if pattern.match(text):
            return kind
    return "unrecognized"


def is_host_result(kind: LineKind) -> bool:
    return kind in ("host_with_address", "host_simple")
