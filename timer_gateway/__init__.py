"""Timer gateway: named, typed timers advanced on a periodic tick."""

__version__ = "0.1.0"
