# setup_db.py
import sys

from db import Base, engine
from models.user_profile import UserProfile

if "--reset" in sys.argv:
    print("🗑️  Dropping tables...")
    Base.metadata.drop_all(bind=engine)
print("📦 Creating tables...")
Base.metadata.create_all(bind=engine)
print(f"✅ Done: {', '.join(Base.metadata.tables)}")
