import logging
from collections import Counter
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.roosters import Rooster
from schemas.roosters import RoosterCreate, RoosterStats, RoosterUpdate
from utils.errors import ServiceError
from utils.permissions import ROOSTER_POLICY, assert_permission
from utils.retry import run_in_transaction
from utils.time_utils import today

logger = logging.getLogger(__name__)

RESOURCE = "roosters"


def parse_price(price) -> float:
    """Prices are stored as typed by the user; anything unparsable counts as zero."""
    try:
        value = float(price or 0)
    except (TypeError, ValueError):
        return 0.0
    return value if value == value else 0.0


def get_roosters(db: Session, user) -> List[Rooster]:
    assert_permission(user, "read", ROOSTER_POLICY, RESOURCE)
    return db.query(Rooster).order_by(Rooster.date_added.desc(), Rooster.id).all()


def list_public_roosters(db: Session) -> List[Rooster]:
    """The catalogue shown on the public site; no session needed."""
    return db.query(Rooster).order_by(Rooster.date_added.desc(), Rooster.id).all()


def get_rooster(db: Session, user, rooster_id: str) -> Rooster:
    assert_permission(user, "read", ROOSTER_POLICY, RESOURCE)
    db_rooster = db.get(Rooster, rooster_id)
    if db_rooster is None:
        raise ServiceError("NOT_FOUND", "Rooster not found.")
    return db_rooster


def create_rooster(db: Session, user, rooster: RoosterCreate) -> Rooster:
    assert_permission(user, "create", ROOSTER_POLICY, RESOURCE)

    if db.get(Rooster, rooster.id) is not None:
        raise ServiceError("ROOSTER_EXISTS")

    data = rooster.model_dump(exclude={"owner", "image", "date_added"})
    db_rooster = Rooster(
        **data,
        date_added=rooster.date_added or today(),
        owner=rooster.owner or None,
        image=rooster.image or (rooster.images[0] if rooster.images else None),
        created_by=user.identifier,
    )

    def work(session: Session) -> Rooster:
        session.add(db_rooster)
        session.flush()
        return db_rooster

    try:
        db_rooster = run_in_transaction(db, work)
    except IntegrityError as e:
        # Lost a race with a concurrent create of the same tag
        raise ServiceError("ROOSTER_EXISTS") from e
    logger.info(f"Rooster '{db_rooster.id}' ({db_rooster.breed}) created by {user.identifier}")
    return db_rooster


def apply_rooster_update(db_rooster: Rooster, update_data: dict) -> None:
    """
    Merge a partial update.

    owner and image: absent keeps the stored value, null or "" removes it.
    When image is absent but a new non-empty images list arrives, image follows
    its first entry.
    """
    for key, value in update_data.items():
        if key in ("owner", "image"):
            continue
        if value is None:
            continue
        setattr(db_rooster, key, value)

    if "owner" in update_data:
        db_rooster.owner = update_data["owner"] or None

    if "image" in update_data:
        db_rooster.image = update_data["image"] or None
    elif update_data.get("images"):
        db_rooster.image = update_data["images"][0]


def update_rooster(db: Session, user, rooster_id: str, rooster: RoosterUpdate) -> Rooster:
    assert_permission(user, "update", ROOSTER_POLICY, RESOURCE)
    update_data = rooster.model_dump(exclude_unset=True)

    def work(session: Session) -> Rooster:
        db_rooster = session.query(Rooster).filter(Rooster.id == rooster_id).with_for_update().first()
        if db_rooster is None:
            raise ServiceError("NOT_FOUND", "Rooster not found.")
        apply_rooster_update(db_rooster, update_data)
        db_rooster.updated_by = user.identifier
        return db_rooster

    db_rooster = run_in_transaction(db, work)
    logger.info(f"Rooster '{rooster_id}' updated by {user.identifier}")
    return db_rooster


def delete_rooster(db: Session, user, rooster_id: str) -> None:
    assert_permission(user, "delete", ROOSTER_POLICY, RESOURCE)

    def work(session: Session) -> None:
        db_rooster = session.query(Rooster).filter(Rooster.id == rooster_id).with_for_update().first()
        if db_rooster is None:
            raise ServiceError("NOT_FOUND", "Rooster not found.")
        session.delete(db_rooster)

    run_in_transaction(db, work)
    logger.info(f"Rooster '{rooster_id}' deleted by {user.identifier}")


def get_rooster_stats(db: Session, user) -> RoosterStats:
    assert_permission(user, "readStats", ROOSTER_POLICY, RESOURCE)
    roosters = db.query(Rooster).all()

    statuses = Counter(r.status for r in roosters)
    total = len(roosters)
    total_value = sum(parse_price(r.price) for r in roosters)
    available_value = sum(parse_price(r.price) for r in roosters if r.status == "Available")
    breed_counts = Counter(r.breed for r in roosters)

    return RoosterStats(
        total=total,
        available=statuses["Available"],
        sold=statuses["Sold"],
        reserved=statuses["Reserved"],
        quarantine=statuses["Quarantine"],
        total_value=total_value,
        available_value=available_value,
        average_price=total_value / total if total else 0.0,
        top_breed=breed_counts.most_common(1)[0][0] if breed_counts else "N/A",
    )
