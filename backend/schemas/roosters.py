from datetime import date
from typing import List, Literal, Optional

from schemas.base import CamelModel, NonEmptyStr

RoosterStatus = Literal["Available", "Sold", "Reserved", "Quarantine", "Deceased"]
RoosterHealth = Literal["excellent", "good", "fair", "poor"]


class RoosterCreate(CamelModel):
    id: NonEmptyStr
    breed_id: str = ""
    breed: NonEmptyStr
    age: str = ""
    weight: str = ""
    price: str = ""
    status: RoosterStatus = "Available"
    health: RoosterHealth = "good"
    images: List[str] = []
    date_added: Optional[date] = None
    owner: Optional[str] = None
    image: Optional[str] = None


class RoosterUpdate(CamelModel):
    breed_id: Optional[str] = None
    breed: Optional[str] = None
    age: Optional[str] = None
    weight: Optional[str] = None
    price: Optional[str] = None
    status: Optional[RoosterStatus] = None
    health: Optional[RoosterHealth] = None
    images: Optional[List[str]] = None
    date_added: Optional[date] = None
    owner: Optional[str] = None
    image: Optional[str] = None


class Rooster(CamelModel):
    id: str
    breed_id: str = ""
    breed: str = ""
    age: str = ""
    weight: str = ""
    price: str = ""
    status: RoosterStatus = "Available"
    health: RoosterHealth = "good"
    images: List[str] = []
    date_added: date
    owner: Optional[str] = None
    image: Optional[str] = None


class RoosterStats(CamelModel):
    total: int
    available: int
    sold: int
    reserved: int
    quarantine: int
    total_value: float
    available_value: float
    average_price: float
    top_breed: str
