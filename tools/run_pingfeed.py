# tools/run_pingfeed.py
# Usage examples:
#   python3 -m tools.run_pingfeed
#   python3 -m tools.run_pingfeed --config ./pingfeed.toml -v
#   python3 -m tools.run_pingfeed --mock          # log records instead of writing to InfluxDB

import argparse
import signal
import sys

from loguru import logger

from pingfeed.config import Settings, load_settings
from pingfeed.errors import PingfeedError
from pingfeed.logs import configure_logging
from pingfeed.parser.interpreter import StreamInterpreter
from pingfeed.runner.fping import FPingRunner
from pingfeed.sink.base import Sink


def build_sink(settings: Settings, force_mock: bool = False) -> Sink:
    if settings.influx.enabled and not force_mock:
        from pingfeed.sink.influx import InfluxSink
        logger.info("InfluxDB enabled, setting up client")
        return InfluxSink.connect(settings.influx)
    from pingfeed.sink.mock import MockSink
    logger.info("Setting up mock client")
    return MockSink()


def run(settings: Settings, force_mock: bool = False) -> int:
    sink = build_sink(settings, force_mock)
    interpreter = StreamInterpreter(sink)
    runner = FPingRunner(settings.fping, settings.hosts)

    # no logging in here, the handler may interrupt a log call
    def _shutdown(signum, frame):
        interpreter.stop()
        runner.stop()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    logger.info("Launching fping with hosts: {}", ", ".join(settings.hosts))
    with runner:
        summary = interpreter.run(runner.lines())
        code = runner.wait()

    if summary["stop_reason"] == "stopped":
        return 0
    logger.error("fping output ended unexpectedly (exit status {})", code)
    return 1


def build_argparser():
    ap = argparse.ArgumentParser(description="Feed continuous fping results into a metrics sink")
    ap.add_argument("--config", help="Path to pingfeed.toml (default: search /etc, /usr/local/etc, /config, .)")
    ap.add_argument("--mock", action="store_true", help="Log records instead of writing them to InfluxDB")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Log every raw line and parsed field")
    return ap


def main(argv=None) -> int:
    args = build_argparser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings(args.config)
        return run(settings, force_mock=args.mock)
    except PingfeedError as e:
        logger.error("{}", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
