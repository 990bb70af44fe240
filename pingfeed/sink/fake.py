# pingfeed/sink/fake.py
from pingfeed.errors import SinkWriteError
from pingfeed.schemas import ProbeResult
from pingfeed.sink.base import Sink


class FakeSink(Sink):
    """
    Keeps every record it is given in `records`.
    fail_on: set of 0-based write attempt numbers that should raise
    SinkWriteError instead of being stored.
    """
    def __init__(self, fail_on=None):
        self.records: list[ProbeResult] = []
        self.fail_on = set(fail_on or ())
        self.attempts = 0

    def write(self, record: ProbeResult) -> None:
        attempt = self.attempts
        self.attempts += 1
        if attempt in self.fail_on:
            raise SinkWriteError(f"scripted failure on write #{attempt}")
        self.records.append(record)
