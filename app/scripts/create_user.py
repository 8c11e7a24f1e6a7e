"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME USERNAME EMAIL PASSWORD [--admin]
Example:
  python -m app.scripts.create_user "Ada Admin" admin admin@example.com s3cret! --admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import ServiceError
from app.core.security import hash_password
from app.models import RoleName, User
from app.schemas.auth import RegisterRequest
from app.services.users import RoleStore, UserStore
from app.services.validation import validate_register

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user from the command line.")
    parser.add_argument("name", help="Display name (4-40 chars)")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-20 chars)")
    parser.add_argument("--admin", action="store_true", help="Also grant ROLE_ADMIN")
    args = parser.parse_args(argv)

    request = RegisterRequest(
        name=args.name.strip(),
        username=args.username.strip(),
        email=args.email.strip(),
        password=args.password,
    )
    errors = validate_register(request)
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        users = UserStore(db)
        roles = RoleStore(db)
        if users.exists_by_username(request.username):
            print(f"User '{request.username}' already exists.", file=sys.stderr)
            return 1
        if users.exists_by_email(request.email):
            print(f"Email '{request.email}' is already in use.", file=sys.stderr)
            return 1

        wanted = [RoleName.ROLE_USER] + ([RoleName.ROLE_ADMIN] if args.admin else [])
        user_roles = []
        for role_name in wanted:
            role = roles.find_by_name(role_name)
            if role is None:
                print(f"Role {role_name.value} is missing; run migrations first.", file=sys.stderr)
                return 1
            user_roles.append(role)

        user = User(
            name=request.name,
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password, settings.BCRYPT_ROUNDS),
            roles=user_roles,
        )
        users.save(user)
        logger.info(
            "Created user '%s' with roles %s",
            user.username,
            [r.value for r in wanted],
        )
        return 0
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
