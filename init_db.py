import os
import sys

from sqlalchemy import select

from app.extensions import db
from app.models import AuthUser, Base
from app.utils.auth_utils import hash_password
from main import create_app

# Usage: python init_db.py
# Creates missing tables. When MANAGER_EMAIL and MANAGER_PASSWORD are set,
# also creates that manager account if it does not exist yet.

app = create_app()

with app.app_context():
    Base.metadata.create_all(bind=db.engine)
    print("Tables created")

    email = os.environ.get("MANAGER_EMAIL")
    password = os.environ.get("MANAGER_PASSWORD")
    if not email or not password:
        print("MANAGER_EMAIL / MANAGER_PASSWORD not set, skipping manager account")
        sys.exit(0)

    existing = db.session.scalar(select(AuthUser).where(AuthUser.email == email))
    if existing:
        print(f"Manager {email} already exists")
    else:
        db.session.add(
            AuthUser(email=email, password_hash=hash_password(password), role="MANAGER")
        )
        db.session.commit()
        print(f"Manager {email} created")
