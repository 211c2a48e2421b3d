GOAL_XP_OPTIONS = (1, 10, 20, 30, 50, 100)
DEFAULT_GOAL_XP = 100


class GoalSlice:
    def __init__(self, goal_xp: int = DEFAULT_GOAL_XP):
        self.goal_xp = DEFAULT_GOAL_XP
        self.set_goal_xp(goal_xp)

    def set_goal_xp(self, goal_xp: int):
        if goal_xp not in GOAL_XP_OPTIONS:
            raise ValueError(f"Daily goal must be one of {list(GOAL_XP_OPTIONS)}, got {goal_xp}")
        self.goal_xp = goal_xp

    def goal_progress(self, xp_today: int) -> dict:
        return {
            "goal_xp": self.goal_xp,
            "xp_today": xp_today,
            "xp_remaining": max(self.goal_xp - xp_today, 0),
            "percentage": round(min(max(xp_today, 0) / self.goal_xp * 100, 100), 2),
        }
