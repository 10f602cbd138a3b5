import datetime as dt
from typing import Literal, Optional

from pydantic import Field

from schemas.base import CamelModel

ReviewStatus = Literal["published", "pending", "hidden"]
REVIEW_STATUSES = ("published", "pending", "hidden")


class ReviewCreate(CamelModel):
    # Blank text and out-of-range ratings are reported by the service
    # (INVALID_REQUEST / INVALID_RATING) rather than by schema validation.
    customer: str
    rating: int = Field(strict=True)
    rooster: str
    comment: str
    customer_id: Optional[str] = None
    transaction_id: Optional[str] = None


class ReviewStatusUpdate(CamelModel):
    id: str
    status: str


class Review(CamelModel):
    id: str
    date: dt.date
    customer: str
    rating: int
    rooster: str
    comment: str
    status: ReviewStatus
    customer_id: Optional[str] = None
    transaction_id: Optional[str] = None


class Testimonial(CamelModel):
    id: str
    date: dt.date
    customer: str
    rating: int
    rooster: str
    comment: str
