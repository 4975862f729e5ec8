"""
Create a user (e.g. the first admin, before anyone can log in). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [role] [--group NAME]
Example:
  python -m app.scripts.create_user admin your-secure-password ADMIN --group staff
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.core.errors import BadRequestError
from app.models.user import UserRole
from app.schemas.user import UserCreateFields, UserCreateRequest, UserGroupRef
from app.services.users import create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a panel user (no registration UI).")
    parser.add_argument("username", help="Username (2-255 chars)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    parser.add_argument("--group", default="default", help="Group name (created if missing)")
    args = parser.parse_args(argv)

    try:
        request = UserCreateRequest(
            user=UserCreateFields(username=args.username.strip(), role=UserRole(args.role)),
            group=UserGroupRef(name=args.group),
            password=args.password,
        )
    except ValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, request.user, request.group, request.password)
        print(f"Created user '{request.user.username}' with role '{args.role}' (id {user.id}).")
        return 0
    except BadRequestError as e:
        print(f"User '{request.user.username}' not created: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
