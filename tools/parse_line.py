# tools/parse_line.py
# Usage: python3 -m tools.parse_line "localhost (::1) : xmt/rcv/%loss = 10/10/0%, min/avg/max = 0.04/0.06/0.07"
import json
import sys

from pingfeed.errors import LineFormatError
from pingfeed.parser.classify import classify, is_host_result
from pingfeed.parser.extract import extract_host, extract_loss, extract_timestamp, find_latencies


def describe(line: str) -> dict:
    kind = classify(line)
    out = {"kind": kind}
    if kind == "timestamp":
        out["timestamp"] = extract_timestamp(line).isoformat()
    elif is_host_result(kind):
        out["host"] = extract_host(line, kind)
        out["loss_percent"] = extract_loss(line)
        out["min_avg_max"] = find_latencies(line)
    return out


def main():
    if len(sys.argv) < 2:
        print('Usage: python3 -m tools.parse_line "<fping output line>"')
        return 2
    try:
        print(json.dumps(describe(sys.argv[1]), indent=2))
    except LineFormatError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
