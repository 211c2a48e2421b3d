# backend/models/user_profile.py

from sqlalchemy import Column, String, DateTime
from db import Base


class UserProfile(Base):
    """Row of the hosted `users` table; `id` is the auth provider's user id."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
