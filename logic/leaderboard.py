from typing import Dict, List, Optional

# motivating classmates shown next to the real learner
FAKE_USERS = [
    {"name": "Aarav", "xp": 180},
    {"name": "Diya", "xp": 145},
    {"name": "Kabir", "xp": 120},
    {"name": "Meera", "xp": 95},
    {"name": "Rohan", "xp": 60},
    {"name": "Sana", "xp": 35},
    {"name": "Vikram", "xp": 10},
]


# lessons a learner must finish before the board is shown
LESSONS_TO_UNLOCK = 1


def lessons_to_unlock(lessons_completed: int) -> int:
    return max(LESSONS_TO_UNLOCK - lessons_completed, 0)


def leaderboard_users(name: str, xp_today: int, fake_users: Optional[List[Dict]] = None) -> List[Dict]:
    users = [{"name": u["name"], "xp": u["xp"], "is_current_user": False}
             for u in (FAKE_USERS if fake_users is None else fake_users)]
    users.append({"name": name or "You", "xp": xp_today, "is_current_user": True})
    # stable sort: ties keep the learner after classmates with the same XP
    return sorted(users, key=lambda u: u["xp"], reverse=True)


def leaderboard_rank(users: List[Dict]) -> Optional[int]:
    for index, user in enumerate(users):
        if user["is_current_user"]:
            return index + 1
    return None
