"""JSON file persistence for timers.

Keeps timers in memory and rewrites a human-readable JSON snapshot after
every mutation, so timer state survives a restart and can be inspected by
hand.
"""
import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger

from ..models import Timer
from .store import MemoryTimerStore

logger = logger.bind(module="timers.json_store")


class JsonTimerStore(MemoryTimerStore):
    """Memory store mirrored to a JSON file."""

    def __init__(self, json_path: str | Path):
        """Initialize JSON timer store.

        Args:
            json_path: Path to JSON file for storage
        """
        super().__init__()
        self.json_path = Path(json_path).expanduser()
        self._initialized = False
        self._file_lock = threading.Lock()

    def initialize(self) -> None:
        """Initialize store by loading from JSON file."""
        self.json_path.parent.mkdir(parents=True, exist_ok=True)

        if self.json_path.exists():
            self._load_from_file()
        else:
            # Create empty file
            self._save_to_file()

        self._initialized = True
        logger.info(f"JSON timer store initialized at {self.json_path}")

    def close(self) -> None:
        """Close store (save final state)."""
        if self._initialized:
            self._save_to_file()

    def _after_write(self) -> None:
        if self._initialized:
            self._save_to_file()

    def _load_from_file(self) -> None:
        """Load timers from JSON file."""
        try:
            with open(self.json_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            records = data.get("timers", []) if isinstance(data, dict) else None
            if not isinstance(records, list):
                raise ValueError("expected an object with a \"timers\" list")

            timers = {}
            for index, timer_data in enumerate(records):
                try:
                    timer = Timer.from_dict(timer_data)
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed timer record #{index}: {e!r}")
                    continue
                timers[timer.name] = timer

            with self._lock:
                self._timers = timers

            logger.info(f"Loaded {len(timers)} timers from {self.json_path}")
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Failed to load from JSON: {e}")
            with self._lock:
                self._timers = {}

    def _save_to_file(self) -> None:
        """Save timers to JSON file."""
        snapshot = self.read_all()
        export_data: dict[str, Any] = {
            "exported_at": datetime.now().isoformat(),
            "total_timers": len(snapshot),
            "timers": [snapshot[name].to_dict() for name in sorted(snapshot)],
        }

        try:
            # Write atomically (write to temp, then rename)
            temp_path = self.json_path.with_suffix(".tmp")
            with self._file_lock:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(export_data, f, ensure_ascii=False, indent=2)
                temp_path.replace(self.json_path)

            logger.debug(f"Saved {len(snapshot)} timers to {self.json_path}")
        except OSError as e:
            logger.error(f"Failed to save to JSON: {e}")
