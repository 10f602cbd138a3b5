import logging
from typing import List, Optional

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from models.users import User
from utils.errors import ServiceError
from utils.permissions import APP_ROLES
from utils.time_utils import now

logger = logging.getLogger(__name__)

bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(db: Session, email: str, password: str, roles: List[str], display_name: Optional[str] = None) -> User:
    unknown = [r for r in roles if r not in APP_ROLES]
    if unknown:
        raise ServiceError("INVALID_REQUEST", f"Unknown roles: {', '.join(unknown)}")
    if get_user_by_email(db, email):
        raise ServiceError("INVALID_REQUEST", "A user with this email already exists.")

    db_user = User(
        email=normalize_email(email),
        display_name=display_name,
        hashed_password=bcrypt_context.hash(password),
        roles=list(roles),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"User {db_user.email} created with roles {db_user.roles}")
    return db_user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check a password login.

    Raises INVALID_CREDENTIALS for an unknown email or a wrong password and
    ACCOUNT_DISABLED for a deactivated account.
    """
    db_user = get_user_by_email(db, email)
    if db_user is None or not bcrypt_context.verify(password, db_user.hashed_password):
        logger.warning(f"Failed login attempt for {email}")
        raise ServiceError("INVALID_CREDENTIALS")
    if not db_user.is_active:
        logger.warning(f"Login attempt for disabled account {email}")
        raise ServiceError("ACCOUNT_DISABLED")
    return db_user


def record_login(db: Session, db_user: User) -> None:
    db_user.last_login = now()
    db.commit()
