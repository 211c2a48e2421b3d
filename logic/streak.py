from datetime import date, datetime, timedelta
from typing import Callable, Optional


class StreakSlice:
    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.streak = 0
        self.last_marked: Optional[date] = None

    def add_today(self):
        today = self.clock().date()
        if self.last_marked == today:
            return
        if self.last_marked is None or self.last_marked == today - timedelta(days=1):
            self.streak += 1
        else:
            # missed at least one whole day
            self.streak = 1
        self.last_marked = today
