import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import argparse
import getpass
from fastapi import HTTPException

from tasktracker.constants.constants import Role
from tasktracker.db.models import Base
from tasktracker.db.session import SessionLocal, engine
from tasktracker.schemas.user import UserCreate
from tasktracker.services.users import create_user


def main():
    """Create the first admin account, which cannot be self-registered."""
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--emp-id", required=True)
    parser.add_argument("--name", required=True)
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = create_user(db, UserCreate(
            email=args.email, password=password, emp_id=args.emp_id, emp_name=args.name, role=Role.admin,
        ))
        print(f"✅ Admin {user.emp_id} created")
    except HTTPException as e:
        print(f"❌ {e.detail}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
