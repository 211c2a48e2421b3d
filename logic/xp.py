from datetime import datetime, timedelta
from typing import Callable, List, NamedTuple


class XpEvent(NamedTuple):
    timestamp: datetime
    amount: int


class XpSlice:
    """
    Ledger of XP changes. Rewards are positive amounts, shop purchases are
    recorded as negative amounts; totals are always derived from the ledger.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.events: List[XpEvent] = []

    def increase_xp(self, amount: int):
        self.events.append(XpEvent(self.clock(), amount))

    def xp_today(self) -> int:
        today = self.clock().date()
        return sum(e.amount for e in self.events if e.timestamp.date() == today)

    def xp_all_time(self) -> int:
        return sum(e.amount for e in self.events)

    def xp_by_day(self, days: int = 7) -> List[int]:
        # oldest day first, today last
        today = self.clock().date()
        totals = {today - timedelta(days=i): 0 for i in range(days)}
        for e in self.events:
            day = e.timestamp.date()
            if day in totals:
                totals[day] += e.amount
        return [totals[day] for day in sorted(totals)]
