from __future__ import annotations

import time
from dataclasses import dataclass, field

from services.product_verification.errors import VerificationDeadlineExceeded


@dataclass
class Deadline:
    seconds: float | None = None
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def none(cls) -> "Deadline":
        return cls(None)

    def remaining(self) -> float | None:
        if self.seconds is None:
            return None
        return self.seconds - (time.monotonic() - self.started_at)

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, where: str = "verification") -> None:
        if self.expired():
            raise VerificationDeadlineExceeded(f"{where} exceeded its {self.seconds:.3f}s deadline")
