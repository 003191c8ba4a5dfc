# models/usage.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List

UsageListener = Callable[[int], None]


@dataclass
class UsageCounter:
    """
    Counts SerpApi searches for whoever owns it (CLI session, chat session...).
    Nothing global: the owner passes it to FlightSearchAgent and reads it back.
    """

    count: int = 0
    limit: int = 100  # SerpApi free tier, searches per month
    listeners: List[UsageListener] = field(default_factory=list)

    def subscribe(self, listener: UsageListener) -> None:
        self.listeners.append(listener)

    def increment(self) -> int:
        self.count += 1
        for listener in self.listeners:
            listener(self.count)
        return self.count

    @property
    def percentage(self) -> float:
        if self.limit <= 0:
            return 100.0
        return self.count / self.limit * 100

    @property
    def level(self) -> str:
        pct = self.percentage
        if pct >= 90:
            return "critical"
        if pct >= 70:
            return "warning"
        return "ok"

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)

    def label(self) -> str:
        return f"API: {self.count}/{self.limit}"
