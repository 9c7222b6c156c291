"""Data model for timers."""
from dataclasses import dataclass
from typing import Any


@dataclass
class Timer:
    """A named timer tracking a running value against a fixed duration.

    ``value`` is accurate as of ``timestamp`` (ms since epoch). Records are
    treated as values: operations build a new record with
    ``dataclasses.replace`` and write it back through the store.
    """
    name: str
    type: str
    duration: int  # Target in milliseconds, fixed at creation
    value: int = 0
    timestamp: int = 0
    running: bool = False
    elapsed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "running": self.running,
            "elapsed": self.elapsed,
            "timestamp": self.timestamp,
            "value": self.value,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Timer":
        """Build a timer from ``to_dict`` output.

        Raises KeyError, TypeError or ValueError on a malformed record.
        """
        name, timer_type = data["name"], data["type"]
        if not isinstance(name, str) or not isinstance(timer_type, str):
            raise TypeError("timer name and type must be strings")
        return cls(
            name=name,
            type=timer_type,
            duration=int(data.get("duration", 0)),
            value=int(data.get("value", 0)),
            timestamp=int(data.get("timestamp", 0)),
            running=bool(data.get("running", False)),
            elapsed=bool(data.get("elapsed", False)),
        )
