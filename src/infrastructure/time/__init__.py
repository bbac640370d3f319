"""Clock adapters."""

from src.infrastructure.time.zoned_clock import ZonedClock

__all__ = ["ZonedClock"]
