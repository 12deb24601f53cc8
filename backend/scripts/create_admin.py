"""CLI script to create (or re-activate) an admin-panel user.

Usage: python scripts/create_admin.py EMAIL PASSWORD [--role admin] [--permissions task1,task3]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `grampanchayat` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from grampanchayat.database import create_db_and_tables, engine
from grampanchayat import permissions, repositories, services


def main(email: str, password: str, role: str = "admin", perms=None) -> int:
    create_db_and_tables()
    with Session(engine) as session:
        existing = repositories.UserRepository(session).get_by_email(email.strip().lower())
        if existing:
            existing.password_hash = services.PWD_CTX.hash(password)
            existing.is_active = True
            repositories.UserRepository(session).save(existing)
            print(f'Updated password for existing user {existing.email} ({existing.role})')
            return 0
        try:
            user = services.UserService(session).create(email, password, role, perms)
        except ValueError as e:
            print(f'Error: {e}')
            return 1
        print(f'Created {user.role} {user.email} with permissions {user.permissions}')
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('email')
    parser.add_argument('password')
    parser.add_argument('--role', default=permissions.ROLE_ADMIN, choices=permissions.ALLOWED_ROLES)
    parser.add_argument('--permissions', default='', help='Comma separated task ids, e.g. task1,task3')
    args = parser.parse_args()
    perms = [p.strip() for p in args.permissions.split(',') if p.strip()]
    sys.exit(main(args.email, args.password, role=args.role, perms=perms))
