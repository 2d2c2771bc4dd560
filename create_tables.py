# create_tables.py
"""
Create the database schema and the default admin user.
"""

from projectdesk.config import settings
from projectdesk.database import SessionLocal, init_db
from projectdesk.models import User
from projectdesk.utils.security import hash_password


def create_default_admin():
    """Create the default admin user unless one with that email exists"""
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
        if existing:
            print(f"Admin user {settings.ADMIN_EMAIL} already exists")
            return existing

        admin = User(
            name=settings.ADMIN_NAME,
            email=settings.ADMIN_EMAIL,
            hashed_password=hash_password(settings.ADMIN_PASSWORD),
            is_admin=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        print(f"✅ Default admin created: {admin.email}")
        return admin
    finally:
        db.close()


def create_tables():
    """Create all tables"""
    init_db()
    print("✅ All tables created successfully!")
    create_default_admin()


if __name__ == "__main__":
    create_tables()
