"""
Script to create the first admin (or a service) account
Run this script after running database migrations

Usage:
    python create_admin.py

Environment Variables (optional):
    ADMIN_EMAIL - Account email address
    ADMIN_PASSWORD - Account password (min 8 characters)
    ADMIN_NAME - Account name
    ADMIN_ROLE - Account role (admin, service)
"""
import sys
import os
from sqlalchemy.exc import OperationalError
from foodhub.database import SessionLocal
from foodhub.models.account import Account, AccountRole
from foodhub.services.auth_service import create_account
from foodhub.config import settings


def create_admin():
    """Create the first admin account"""
    db = SessionLocal()

    try:
        try:
            existing_admin = db.query(Account).filter(Account.role == AccountRole.ADMIN).first()
        except OperationalError as e:
            if "no such table" in str(e).lower():
                print("[ERROR] Accounts table does not exist!")
                print("   Please run database migrations first:")
                print("   alembic upgrade head")
                return
            raise

        print("=" * 50)
        print("Create Account")
        print("=" * 50)

        email = os.getenv("ADMIN_EMAIL", "").strip() or settings.ADMIN_EMAIL
        password = os.getenv("ADMIN_PASSWORD", "").strip() or settings.ADMIN_PASSWORD
        name = os.getenv("ADMIN_NAME", "").strip() or settings.ADMIN_NAME
        role_str = os.getenv("ADMIN_ROLE", "").strip() or settings.ADMIN_ROLE

        try:
            role = AccountRole(role_str.lower())
        except ValueError:
            print(f"[ERROR] Unknown role '{role_str}'. Use 'admin' or 'service'.")
            return

        if role == AccountRole.ADMIN and existing_admin:
            print("[ERROR] Admin account already exists!")
            print(f"   Email: {existing_admin.email}")
            return

        if not email:
            email = input("Enter account email: ").strip()
            if not email:
                print("[ERROR] Email is required!")
                return

        if not password:
            password = input("Enter account password (min 8 characters): ").strip()
        if len(password) < 8:
            print("[ERROR] Password must be at least 8 characters!")
            return

        account = create_account(db, email=email, password=password, name=name or "Admin", role=role)

        print("\n" + "=" * 50)
        print("[SUCCESS] Account created successfully!")
        print("=" * 50)
        print(f"   Email: {account.email}")
        print(f"   Name: {account.name}")
        print(f"   Role: {account.role.value}")
        print(f"   ID: {account.id}")
        print("\n[TIP] You can now login at: POST /api/v1/auth/login")
        print("=" * 50)

    except Exception as e:
        db.rollback()
        print(f"[ERROR] Error creating account: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_admin()
