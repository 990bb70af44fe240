# pingfeed/sink/mock.py
from loguru import logger

from pingfeed.schemas import ProbeResult
from pingfeed.sink.base import Sink


class MockSink(Sink):
    """Used when InfluxDB is disabled: every record ends up in the log."""

    def write(self, record: ProbeResult) -> None:
        logger.info("{}", record)
