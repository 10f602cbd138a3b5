import argparse
import getpass
import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add the parent directory to sys.path to allow imports from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal, init_db
from crud import users as crud_users
from utils.errors import ServiceError
from utils.permissions import APP_ROLES

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("create_user")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Provision a dashboard user.")
    parser.add_argument("email")
    parser.add_argument(
        "--role",
        dest="roles",
        action="append",
        choices=APP_ROLES,
        help="Role to grant; repeat for several. Defaults to viewer.",
    )
    parser.add_argument("--name", dest="display_name", help="Display name")
    parser.add_argument("--password", help="Password (prompted for when omitted)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    password = args.password or getpass.getpass("Password: ")
    if not password:
        logger.error("A password is required.")
        return 1

    init_db()
    db = SessionLocal()
    try:
        user = crud_users.create_user(db, args.email, password, args.roles or ["viewer"], args.display_name)
        logger.info(f"Created user {user.email} (uid {user.id}) with roles {', '.join(user.roles)}")
        return 0
    except ServiceError as e:
        logger.error(f"Could not create user: {e.message or e.code}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
