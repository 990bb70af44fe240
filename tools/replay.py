# tools/replay.py
# Replays a captured fping stderr log (e.g. `fping -l -D -n -A -Q 10 host 2> out.log`)
# through the interpreter and prints the records it would have written.
# Usage:
#   python3 -m tools.replay out.log
#   python3 -m tools.replay out.log --source-host probe-01 -v

import argparse
import json
import sys

from loguru import logger

from pingfeed.errors import LineFormatError
from pingfeed.logs import configure_logging
from pingfeed.parser.interpreter import StreamInterpreter
from pingfeed.sink.fake import FakeSink


def replay(path: str, source_host=None) -> dict:
    sink = FakeSink()
    interpreter = StreamInterpreter(sink, source_host=source_host)
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        summary = interpreter.run(line.rstrip("\r\n") for line in f)
    return {
        "summary": summary,
        "records": [r.to_dict() for r in sink.records],
    }


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Replay captured fping output through the interpreter")
    ap.add_argument("path", help="File holding fping stderr output")
    ap.add_argument("--source-host", default=None, help="tx_host to stamp on records (default: this machine)")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)

    try:
        res = replay(args.path, source_host=args.source_host)
    except (OSError, LineFormatError) as e:
        logger.error("{}", e)
        return 1
    print(json.dumps(res, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
