from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from database import get_db
from schemas.rooster_breeds import RoosterBreed, RoosterBreedCreate, RoosterBreedUpdate
from utils.auth_utils import SessionUser, get_session_user
from utils.responses import json_success, serialize, serialize_many
from crud import rooster_breeds as crud_breeds

# Included ahead of the roosters router so /roosters/{id} does not shadow it
router = APIRouter(prefix="/roosters/breeds", tags=["Rooster Breeds"])
logger = logging.getLogger("rooster_breeds")


@router.get("")
def read_breeds(
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    breeds = crud_breeds.get_breeds(db, user)
    return json_success(serialize_many(RoosterBreed, breeds))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_breed(
    breed: RoosterBreedCreate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_breed = crud_breeds.create_breed(db, user, breed)
    return json_success(serialize(RoosterBreed, db_breed), status_code=status.HTTP_201_CREATED)


@router.put("")
def update_breed(
    breed: RoosterBreedUpdate,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    db_breed = crud_breeds.update_breed(db, user, breed)
    return json_success(serialize(RoosterBreed, db_breed))


@router.delete("")
def delete_breed(
    id: Optional[str] = None,
    db: Session = Depends(get_db),
    user: Optional[SessionUser] = Depends(get_session_user),
):
    crud_breeds.delete_breed(db, user, id)
    return json_success({"message": "Breed deleted successfully"})
