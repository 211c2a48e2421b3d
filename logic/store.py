import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from logic import lesson_run, scoring
from logic.badges import BadgeSlice
from logic.goal import GoalSlice
from logic.lesson_run import LessonRun
from logic.lessons import LessonSlice, UNITS, Unit
from logic.session import SessionSlice
from logic.shop import ShopSlice
from logic.streak import StreakSlice
from logic.xp import XpSlice

logger = logging.getLogger(__name__)


class LearnerState:
    """
    All of one learner's gamification state.

    Slices stay independent objects; the only cross-slice links are passed in
    here (the shop spends through the XP slice, logging in marks the streak).
    Mutations go through the methods below so subscribers see every change.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now, units: Sequence[Unit] = UNITS,
                 badges: Optional[Sequence[str]] = None):
        self.clock = clock
        self.xp = XpSlice(clock)
        self.streak = StreakSlice(clock)
        self.lessons = LessonSlice(units)
        self.goal = GoalSlice()
        self.shop = ShopSlice(self.xp)
        self.badges = BadgeSlice(badges)
        self.session = SessionSlice(clock, activity_marker=self.streak)
        self._listeners: List[Callable[["LearnerState"], None]] = []

    # --------- Subscriptions ---------
    def subscribe(self, listener: Callable[["LearnerState"], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        for listener in list(self._listeners):
            listener(self)

    # --------- XP / streak / goal ---------
    def increase_xp(self, amount: int):
        self.xp.increase_xp(amount)
        self._changed()

    def add_today(self):
        self.streak.add_today()
        self._changed()

    def set_goal_xp(self, goal_xp: int):
        self.goal.set_goal_xp(goal_xp)
        self._changed()

    # --------- Lessons ---------
    def increase_lessons_completed(self, n: int = 1):
        self.lessons.increase_lessons_completed(n)
        self._changed()

    def open_treasure(self, index: int) -> bool:
        opened = self.lessons.open_treasure(index)
        if opened:
            self._changed()
        return opened

    def jump_to_unit(self, unit_number: int):
        self.lessons.jump_to_unit(unit_number)
        self._changed()

    def complete_lesson(self, correct_answers: int, incorrect_answers: int) -> Dict:
        summary = scoring.lesson_summary(correct_answers, incorrect_answers, self.lessons.lessons_completed)
        self.xp.increase_xp(summary["xp_awarded"])
        self.lessons.increase_lessons_completed(summary["lessons"])
        for badge in summary["badges"]:
            self.badges.add_badge(badge)
        self._changed()
        return summary

    def finish_lesson_run(self, run: LessonRun) -> Optional[Dict]:
        """Reward a completed run once; failed or unfinished runs earn nothing."""
        if run.outcome != lesson_run.COMPLETE or run.rewarded:
            return None
        run.rewarded = True
        return self.complete_lesson(run.correct_answers, run.incorrect_answers)

    def submit_quiz(self, questions: Sequence[dict], answers: Sequence[Optional[int]]) -> Dict:
        result = scoring.grade_quiz(questions, answers)
        if result["xp_awarded"] > 0:
            self.xp.increase_xp(result["xp_awarded"])
        result["badges"] = [b for b in scoring.quiz_badges(result) if self.badges.add_badge(b)]
        self._changed()
        return result

    # --------- Shop / badges ---------
    def purchase_item(self, item_id: str, price: int) -> bool:
        bought = self.shop.purchase_item(item_id, price)
        if bought:
            self._changed()
        return bought

    def add_badge(self, badge: str) -> bool:
        added = self.badges.add_badge(badge)
        if added:
            self._changed()
        return added

    # --------- Session ---------
    def log_in(self, user_id: str, email: str, first_name: str = "", last_name: str = ""):
        self.session.apply_profile(user_id, email, first_name, last_name)
        self.session.log_in()
        logger.info("Learner %s logged in (streak %s)", user_id, self.streak.streak)
        self._changed()

    def log_out(self):
        self.session.log_out()
        self._changed()

    def update_profile(self, name=None, username=None, email=None, standard=None):
        if name is not None:
            self.session.set_name(name)
        if username is not None:
            self.session.set_username(username)
        if email is not None:
            self.session.set_email(email)
        if standard is not None:
            self.session.set_standard(standard)
        self._changed()

    def snapshot(self) -> Dict:
        xp_today = self.xp.xp_today()
        session = self.session
        return {
            "user": {
                "id": session.user_id,
                "name": session.name,
                "username": session.username,
                "email": session.email,
                "standard": session.standard,
                "joined_at": session.joined_at.isoformat(),
                "logged_in": session.logged_in,
            },
            "xp": {
                "today": xp_today,
                "all_time": self.xp.xp_all_time(),
                "last_7_days": self.xp.xp_by_day(7),
            },
            "goal": self.goal.goal_progress(xp_today),
            "streak": {
                "count": self.streak.streak,
                "last_marked": self.streak.last_marked.isoformat() if self.streak.last_marked else None,
            },
            "lessons_completed": self.lessons.lessons_completed,
            "purchased_items": self.shop.get_purchased_items(),
            "badges": list(self.badges.badges),
        }
