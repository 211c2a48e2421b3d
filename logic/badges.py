from typing import Iterable, List, Optional

STARTER_BADGES = [
    "First Learner",
    "Starting Steps",
    "Consistency Starter",
]


class BadgeSlice:
    """Badge names in award order. Earning rules live with the callers."""

    def __init__(self, badges: Optional[Iterable[str]] = None):
        self.badges: List[str] = []
        for badge in STARTER_BADGES if badges is None else badges:
            self.add_badge(badge)

    def add_badge(self, badge: str) -> bool:
        if badge in self.badges:
            return False
        self.badges.append(badge)
        return True

    def has_badge(self, badge: str) -> bool:
        return badge in self.badges
