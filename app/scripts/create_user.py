"""
Create a user (e.g. the first admin; self-registration only creates USER accounts).
Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD FIRST_NAME LAST_NAME [role]
Example:
  python -m app.scripts.create_user admin@acme.io your-secure-password Ada Admin ADMIN
"""
import argparse
import logging
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.config import get_settings
from app.core.database import Database
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.user import Role
from app.services.errors import EmailInUseError
from app.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a directory user.")
    parser.add_argument("email", help="Email (stored lowercase)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    try:
        email = TypeAdapter(EmailStr).validate_python(args.email.strip())
    except ValidationError:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    if not args.first_name.strip() or not args.last_name.strip():
        print("First and last name are required.", file=sys.stderr)
        return 1

    owns_database = database is None
    if database is None:
        database = Database(get_settings().DATABASE_URL)
    db = database.session()
    try:
        user = create_user(
            db,
            email=email,
            password=args.password,
            first_name=args.first_name.strip(),
            last_name=args.last_name.strip(),
            role=args.role,
        )
        print(f"Created user '{user.email}' with role '{user.role}'.")
        return 0
    except EmailInUseError:
        print(f"User '{email.lower()}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
        if owns_database:
            database.dispose()


if __name__ == "__main__":
    sys.exit(main())
