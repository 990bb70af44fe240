# tests/test_interpreter_unit.py
from datetime import date, datetime, timezone

import pytest

from pingfeed.errors import TimestampFormatError, UnrecognizedLineError
from pingfeed.parser.interpreter import StreamInterpreter
from pingfeed.sink.fake import FakeSink

FIXED_NOW = datetime(2024, 5, 17, 8, 30, 0, tzinfo=timezone.utc)


def make(sink=None, **kw):
    kw.setdefault("source_host", "probe-01")
    kw.setdefault("clock", lambda: FIXED_NOW)
    return StreamInterpreter(sink or FakeSink(), **kw)


def test_state_starts_at_now():
    interp = make()
    assert interp.state.last_timestamp == FIXED_NOW


def test_single_record_under_timestamp_block():
    """One timestamp line followed by one host line gives exactly one record."""
    sink = FakeSink()
    interp = StreamInterpreter(sink, source_host="probe-01")
    summary = interp.run([
        "[09:00:00]",
        "host1 : xmt/rcv/%loss = 1/1/0%, min/avg/max = 1.0/1.0/1.0]",
    ])

    assert summary["records"] == 1
    assert summary["stop_reason"] == "end_of_stream"
    assert len(sink.records) == 1
    rec = sink.records[0]
    assert rec.dest_host == "host1"
    assert rec.source_host == "probe-01"
    assert (rec.timestamp.hour, rec.timestamp.minute, rec.timestamp.second) == (9, 0, 0)
    assert rec.timestamp.date() == date.today()


def test_results_batched_under_latest_timestamp():
    sink = FakeSink()
    make(sink).run([
        "[10:00:00]",
        "a : xmt/rcv/%loss = 10/10/0%, min/avg/max = 0.02/0.06/0.08",
        "b (10.0.0.2) : xmt/rcv/%loss = 10/5/50%, min/avg/max = 1.10/2.20/3.30",
        "[10:00:10]",
        "a : xmt/rcv/%loss = 10/10/0%, min/avg/max = 0.03/0.05/0.09",
    ])

    assert [r.dest_host for r in sink.records] == ["a", "b (10.0.0.2)", "a"]
    assert [r.timestamp.strftime("%H:%M:%S") for r in sink.records] == ["10:00:00", "10:00:00", "10:00:10"]
    assert all(r.timestamp.date() == FIXED_NOW.date() for r in sink.records)
    assert sink.records[1].loss_percent == 50
    assert (sink.records[1].min_ms, sink.records[1].avg_ms, sink.records[1].max_ms) == (1.10, 2.20, 3.30)


def test_host_line_before_any_timestamp_uses_start_time():
    sink = FakeSink()
    make(sink).run(["a : xmt/rcv/%loss = 1/1/0%, min/avg/max = 1.0/1.0/1.0"])
    assert sink.records[0].timestamp == FIXED_NOW


def test_out_of_order_timestamp_moves_state_back():
    interp = make()
    interp.feed("[12:00:00]")
    interp.feed("[11:00:00]")
    assert interp.state.last_timestamp.hour == 11


def test_total_loss_record_has_no_latency():
    rec = make().feed("example.org : xmt/rcv/%loss = 5/0/100%,")
    assert rec.loss_percent == 100
    assert (rec.min_ms, rec.avg_ms, rec.max_ms) == (0.0, 0.0, 0.0)
    assert rec.has_latency is False


def test_zero_latency_reading_is_not_mistaken_for_missing_data():
    rec = make().feed("a : xmt/rcv/%loss = 1/1/0%, min/avg/max = 0.00/0.00/0.00")
    assert rec.has_latency is True
    assert "min" in rec.to_point()["fields"]


def test_address_line_dest_host():
    rec = make().feed("localhost (::1)       : xmt/rcv/%loss = 10/10/0%, min/avg/max = 0.04/0.06/0.07")
    assert rec.dest_host == "localhost (::1)"


def test_timestamp_line_emits_nothing():
    sink = FakeSink()
    summary = make(sink).run(["[09:00:00]", "[09:00:10]"])
    assert summary["records"] == 0
    assert sink.records == []


def test_unrecognized_line_halts_run():
    sink = FakeSink()
    lines = [
        "[09:00:00]",
        "a : xmt/rcv/%loss = 1/1/0%, min/avg/max = 1.0/1.0/1.0",
        "garbage text",
        "b : xmt/rcv/%loss = 1/1/0%, min/avg/max = 1.0/1.0/1.0",
    ]
    interp = make(sink)
    with pytest.raises(UnrecognizedLineError) as exc:
        interp.run(lines)

    assert "garbage text" in str(exc.value)
    assert exc.value.line == "garbage text"
    assert [r.dest_host for r in sink.records] == ["a"]
    assert interp.running is False


def test_bad_timestamp_halts_run():
    sink = FakeSink()
    with pytest.raises(TimestampFormatError):
        make(sink).run(["[24:00:00]", "a : xmt/rcv/%loss = 1/1/0%,"])
    assert sink.records == []


def test_sink_failure_does_not_stop_processing():
    sink = FakeSink(fail_on={0})
    summary = make(sink).run([
        "[09:00:00]",
        "a : xmt/rcv/%loss = 1/1/0%, min/avg/max = 1.0/1.0/1.0",
        "b : xmt/rcv/%loss = 1/1/0%, min/avg/max = 2.0/2.0/2.0",
    ])

    assert summary["records"] == 2
    assert summary["write_failures"] == 1
    assert [r.dest_host for r in sink.records] == ["b"]
    assert sink.attempts == 2


def test_failed_write_is_not_retried():
    sink = FakeSink(fail_on={0, 1, 2})
    make(sink).run(["a : xmt/rcv/%loss = 1/1/0%,"])
    assert sink.attempts == 1


def test_stop_request_ends_run():
    sink = FakeSink()
    interp = make(sink)

    def lines():
        yield "a : xmt/rcv/%loss = 1/1/0%,"
        interp.stop()
        yield "b : xmt/rcv/%loss = 1/1/0%,"

    summary = interp.run(lines())
    assert summary["stop_reason"] == "stopped"
    assert [r.dest_host for r in sink.records] == ["a"]


def test_interpreters_do_not_share_state():
    one, two = make(), make()
    one.feed("[01:02:03]")
    assert two.state.last_timestamp == FIXED_NOW
    assert one.state is not two.state


class ExplodingSink(FakeSink):
    """Raises an error that is not a SinkWriteError on its first write."""

    def write(self, record):
        if self.attempts == 0:
            self.attempts += 1
            raise ValueError("client library blew up")
        super().write(record)


def test_unwrapped_sink_error_does_not_stop_processing():
    sink = ExplodingSink()
    summary = make(sink).run([
        "a : xmt/rcv/%loss = 1/1/0%, min/avg/max = 1.0/1.0/1.0",
        "b : xmt/rcv/%loss = 1/1/0%, min/avg/max = 2.0/2.0/2.0",
    ])
    assert summary["write_failures"] == 1
    assert summary["records"] == 2
    assert [r.dest_host for r in sink.records] == ["b"]


def test_default_clock_gives_aware_local_start_time():
    interp = StreamInterpreter(FakeSink(), source_host="probe-01")
    assert interp.state.last_timestamp.tzinfo is not None
