"""
Create the first admin (or promote an existing user)

Usage: python -m scripts.create_admin admin@dakbox.com "Admin Name"
"""
import sys

from app.config.database import SessionLocal, init_db
from app.shared.database.models import User, RiderApplication
from app.shared.schemas.common import normalize_email


def create_admin(email: str, name: str = None) -> bool:
    """Insert an admin user, or promote the user with that email"""
    email = normalize_email(email)

    init_db()
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.email == email).first()

        if user and user.role == "admin":
            print(f"✅ {email} is already an admin (ID: {user.id})")
            return True

        if db.query(RiderApplication).filter(RiderApplication.email == email).first():
            print(f"❌ {email} has a rider application; remove it first")
            return False

        if user:
            user.role = "admin"
            print(f"⬆️  Promoting {email} to admin (ID: {user.id})")
        else:
            user = User(email=email, name=name or email.split("@")[0], role="admin")
            db.add(user)
            print(f"👤 Creating admin {email}")

        db.commit()
        print("🎉 Done")
        return True

    except Exception as e:
        db.rollback()
        print(f"❌ Error: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    ok = create_admin(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)
    sys.exit(0 if ok else 1)
