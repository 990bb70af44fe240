# pingfeed/parser/interpreter.py

import socket
import threading
from datetime import datetime
from typing import Callable, Iterable, Optional

from loguru import logger

from pingfeed.errors import SinkWriteError, UnrecognizedLineError
from pingfeed.parser.classify import classify, clean, is_host_result
from pingfeed.parser.extract import (
    NO_LATENCY,
    extract_host,
    extract_loss,
    extract_timestamp,
    find_latencies,
)
from pingfeed.parser.state import ParserState, localize
from pingfeed.schemas import ProbeResult
from pingfeed.sink.base import Sink


class StreamInterpreter:
    """
    Turns fping's stderr stream into ProbeResult records and hands each one
    to a sink exactly once.

    Host lines are stamped with whichever "[HH:MM:SS]" line came before them;
    that timestamp lives on this instance, so two interpreters never share it.
    """

    def __init__(self,
                 sink: Sink,
                 source_host: Optional[str] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.sink = sink
        # a naive clock reading is local wall time
        self.clock = clock or datetime.now
        self.source_host = source_host or socket.gethostname()
        self.state = ParserState(last_timestamp=localize(self.clock()))
        self.running = False
        self._stop = threading.Event()

    def stop(self) -> None:
        self._stop.set()

    def feed(self, line: str) -> Optional[ProbeResult]:
        """Interpret one line. Returns a record for host lines, None otherwise."""
        kind = classify(line)

        if kind == "timestamp":
            self.state.last_timestamp = extract_timestamp(line, now=self.clock())
            return None

        if not is_host_result(kind):
            text = clean(line)
            raise UnrecognizedLineError(f"unrecognized format: {text!r}", text)

        latencies = find_latencies(line)
        min_ms, avg_ms, max_ms = latencies or NO_LATENCY
        return ProbeResult(
            timestamp=self.state.last_timestamp,
            source_host=self.source_host,
            dest_host=extract_host(line, kind),
            loss_percent=extract_loss(line),
            min_ms=min_ms,
            avg_ms=avg_ms,
            max_ms=max_ms,
            has_latency=latencies is not None,
        )

    def run(self, lines: Iterable[str]) -> dict:
        summary = {"lines": 0, "records": 0, "write_failures": 0, "stop_reason": None}
        self.running = True
        try:
            for line in lines:
                if self._stop.is_set():
                    break
                summary["lines"] += 1
                logger.debug("raw: {!r}", line)

                # Format errors propagate; nothing is resynchronised.
                record = self.feed(line)
                if record is None:
                    continue

                summary["records"] += 1
                try:
                    self.sink.write(record)
                except SinkWriteError as e:
                    # no retry, no requeue
                    summary["write_failures"] += 1
                    logger.error("Error writing data point for {}: {}", record.dest_host, e)
                except Exception:
                    # a sink that does not wrap its errors still only costs this record
                    summary["write_failures"] += 1
                    logger.exception("Unexpected error writing data point for {}", record.dest_host)
        finally:
            self.running = False

        summary["stop_reason"] = "stopped" if self._stop.is_set() else "end_of_stream"
        logger.info(
            "Interpreter stopped ({}): {} lines, {} records, {} failed writes",
            summary["stop_reason"], summary["lines"], summary["records"], summary["write_failures"],
        )
        return summary
