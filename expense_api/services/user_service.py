from datetime import datetime

from sqlalchemy.orm import Session

from expense_api.core.enums import UserRole
from expense_api.core.exceptions import ConflictError, NotFoundError
from expense_api.core.logging_config import get_logger
from expense_api.core.security import hash_password
from expense_api.models.user import User

logger = get_logger(__name__)


def _email_taken(db: Session, email: str) -> bool:
    # soft-deleted users still hold their row in the unique index
    return db.query(User.id).filter(User.email == email).first() is not None


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.EMPLOYEE,
) -> User:
    email = email.lower()
    if _email_taken(db, email):
        raise ConflictError("Email already exists")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role or UserRole.EMPLOYEE,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("user_created", user_id=str(user.id), role=user.role.value)
    return user


def list_users(db: Session):
    return (
        db.query(User)
        .filter(User.deleted_at.is_(None))
        .order_by(User.created_at)
        .all()
    )


def get_user(db: Session, user_id) -> User:
    user = (
        db.query(User)
        .filter(User.id == user_id, User.deleted_at.is_(None))
        .first()
    )
    if not user:
        raise NotFoundError.for_entity("User", user_id)
    return user


def get_user_by_email(db: Session, email: str):
    return (
        db.query(User)
        .filter(User.email == email.lower(), User.deleted_at.is_(None))
        .first()
    )


def update_user(db: Session, user_id, data: dict) -> User:
    user = get_user(db, user_id)

    if data.get("email"):
        data["email"] = data["email"].lower()
        if data["email"] != user.email and _email_taken(db, data["email"]):
            raise ConflictError("Email already exists")

    for k, v in data.items():
        setattr(user, k, v)

    db.commit()
    db.refresh(user)
    return user


def record_login(db: Session, user: User) -> None:
    user.last_login_at = datetime.utcnow()
    db.commit()


def remove_user(db: Session, user_id) -> None:
    user = get_user(db, user_id)
    user.deleted_at = datetime.utcnow()
    user.is_active = False
    db.commit()

    logger.info("user_deleted", user_id=str(user_id))
