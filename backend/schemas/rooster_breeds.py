from datetime import datetime
from typing import List, Optional

from schemas.base import CamelModel


class RoosterBreedCreate(CamelModel):
    # Blank names are reported by the service as INVALID_REQUEST
    name: str
    description: Optional[str] = None
    characteristics: List[str] = []
    origin: Optional[str] = None


class RoosterBreedUpdate(RoosterBreedCreate):
    id: str


class RoosterBreed(CamelModel):
    id: str
    name: str
    description: str = ""
    characteristics: List[str] = []
    origin: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None


class PublicRoosterBreed(CamelModel):
    id: str
    name: str
    description: str = ""
    characteristics: List[str] = []
    origin: str = ""
