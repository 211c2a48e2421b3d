from datetime import datetime
from typing import Callable, Optional


class SessionSlice:
    """
    Profile fields and the logged-in flag.

    `activity_marker` is any object with an `add_today()` method (the streak
    slice in the running app). When it is None, logging in only flips the flag.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now, activity_marker=None):
        self.clock = clock
        self.activity_marker = activity_marker
        self.user_id: Optional[str] = None
        self.name = ""
        self.username = ""
        self.email = ""
        self.standard = ""
        self.joined_at = clock()
        self.logged_in = False

    def set_name(self, name: str):
        self.name = name

    def set_username(self, username: str):
        self.username = username

    def set_email(self, email: str):
        self.email = email

    def set_standard(self, standard: str):
        self.standard = standard

    def apply_profile(self, user_id: str, email: str, first_name: str = "", last_name: str = ""):
        self.user_id = user_id
        self.email = email or ""
        self.name = " ".join(p for p in (first_name, last_name) if p)
        self.username = self.email.split("@")[0] if self.email else ""

    def log_in(self):
        self.logged_in = True
        if self.activity_marker is not None:
            self.activity_marker.add_today()

    def log_out(self):
        self.logged_in = False
        self.user_id = None
        self.name = ""
        self.username = ""
        self.email = ""
        self.standard = ""
