"""Wall-clock implementation of IClock."""

from datetime import datetime, timezone

from authcore.domain.services.clock import IClock


class SystemClock(IClock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
