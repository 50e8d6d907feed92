"""
Seed the feature catalog, the default role matrix and the first admin
Run this once against a fresh database (after 'alembic upgrade head')
"""
import sys

from backoffice.core.config import settings
from backoffice.core.logging import setup_logging
from backoffice.db.init_db import init_db
from backoffice.db.session import SessionLocal, create_sqlite_schema

if __name__ == "__main__":
    setup_logging()
    create_sqlite_schema()
    email = sys.argv[1] if len(sys.argv) > 1 else settings.INITIAL_ADMIN_EMAIL
    db = SessionLocal()
    try:
        init_db(db, email, settings.INITIAL_ADMIN_PASSWORD)
        print("\nDatabase initialized!")
        print(f"Admin login: {email.lower()}")
    finally:
        db.close()
