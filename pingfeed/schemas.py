from dataclasses import dataclass
from datetime import datetime
from typing import Literal

LineKind = Literal["timestamp", "host_with_address", "host_simple", "unrecognized"]

MEASUREMENT = "ping"


@dataclass(frozen=True)
class ProbeResult:
    timestamp: datetime
    source_host: str
    dest_host: str
    loss_percent: int
    min_ms: float = 0.0
    avg_ms: float = 0.0
    max_ms: float = 0.0
    # False when fping printed no min/avg/max clause (nothing received)
    has_latency: bool = False

    def to_point(self) -> dict:
        fields = {"loss": self.loss_percent}
        if self.has_latency:
            fields.update({"min": self.min_ms, "avg": self.avg_ms, "max": self.max_ms})
        return {
            "measurement": MEASUREMENT,
            "tags": {"rx_host": self.dest_host, "tx_host": self.source_host},
            "time": self.timestamp,
            "fields": fields,
        }

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "source_host": self.source_host,
            "dest_host": self.dest_host,
            "loss_percent": self.loss_percent,
            "min_ms": self.min_ms if self.has_latency else None,
            "avg_ms": self.avg_ms if self.has_latency else None,
            "max_ms": self.max_ms if self.has_latency else None,
        }

    def __str__(self) -> str:
        return (
            f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] ({self.source_host}) {self.dest_host}: "
            f"{self.min_ms:.2f}/{self.avg_ms:.2f}/{self.max_ms:.2f} ({self.loss_percent}%)"
        )
