import logging
from typing import List

from sqlalchemy.orm import Session

from models.rooster_breeds import RoosterBreed
from models.roosters import Rooster
from schemas.rooster_breeds import RoosterBreedCreate, RoosterBreedUpdate
from utils.errors import ServiceError
from utils.permissions import BREED_POLICY, assert_permission
from utils.retry import run_in_transaction
from utils.time_utils import now

logger = logging.getLogger(__name__)

RESOURCE = "breeds"


def _clean_name(name) -> str:
    name = (name or "").strip()
    if not name:
        raise ServiceError("INVALID_REQUEST", "Breed name is required.")
    return name


def _breed_fields(breed: RoosterBreedCreate, name: str) -> dict:
    return {
        "name": name,
        "description": (breed.description or "").strip(),
        "characteristics": list(breed.characteristics or []),
        "origin": (breed.origin or "").strip(),
    }


def list_breeds(db: Session) -> List[RoosterBreed]:
    """Alphabetical; used unguarded by the public site."""
    return db.query(RoosterBreed).order_by(RoosterBreed.name.asc()).all()


def get_breeds(db: Session, user) -> List[RoosterBreed]:
    assert_permission(user, "read", BREED_POLICY, RESOURCE)
    return list_breeds(db)


def create_breed(db: Session, user, breed: RoosterBreedCreate) -> RoosterBreed:
    assert_permission(user, "create", BREED_POLICY, RESOURCE)
    name = _clean_name(breed.name)

    def work(session: Session) -> RoosterBreed:
        if session.query(RoosterBreed).filter(RoosterBreed.name == name).first():
            raise ServiceError("BREED_EXISTS")
        db_breed = RoosterBreed(**_breed_fields(breed, name), created_by=user.uid)
        session.add(db_breed)
        session.flush()
        return db_breed

    db_breed = run_in_transaction(db, work)
    logger.info(f"Breed '{name}' (ID: {db_breed.id}) created by {user.identifier}")
    return db_breed


def update_breed(db: Session, user, breed: RoosterBreedUpdate) -> RoosterBreed:
    assert_permission(user, "update", BREED_POLICY, RESOURCE)
    if not breed.id:
        raise ServiceError("INVALID_REQUEST", "Breed ID is required.")
    name = _clean_name(breed.name)

    def work(session: Session) -> RoosterBreed:
        db_breed = session.query(RoosterBreed).filter(RoosterBreed.id == breed.id).with_for_update().first()
        if db_breed is None:
            raise ServiceError("BREED_NOT_FOUND")
        conflict = (
            session.query(RoosterBreed)
            .filter(RoosterBreed.name == name, RoosterBreed.id != breed.id)
            .first()
        )
        if conflict:
            raise ServiceError("BREED_EXISTS")
        for key, value in _breed_fields(breed, name).items():
            setattr(db_breed, key, value)
        db_breed.updated_at = now()
        db_breed.updated_by = user.uid
        return db_breed

    db_breed = run_in_transaction(db, work)
    logger.info(f"Breed '{name}' (ID: {breed.id}) updated by {user.identifier}")
    return db_breed


def delete_breed(db: Session, user, breed_id: str) -> None:
    """Refused while any rooster still carries the breed's name."""
    assert_permission(user, "delete", BREED_POLICY, RESOURCE)
    if not breed_id:
        raise ServiceError("INVALID_REQUEST", "Breed ID is required.")

    def work(session: Session) -> str:
        db_breed = session.query(RoosterBreed).filter(RoosterBreed.id == breed_id).with_for_update().first()
        if db_breed is None:
            raise ServiceError("BREED_NOT_FOUND")
        if session.query(Rooster.id).filter(Rooster.breed == db_breed.name).first():
            raise ServiceError("BREED_IN_USE")
        name = db_breed.name
        session.delete(db_breed)
        return name

    name = run_in_transaction(db, work)
    logger.info(f"Breed '{name}' (ID: {breed_id}) deleted by {user.identifier}")
