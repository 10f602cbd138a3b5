from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python, readable straight from ORM rows."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Upper bound for stock levels, thresholds, prices and amounts; keeps sums and
# price * stock products finite
MAX_NUMBER = 1e12

# A JSON number, not a numeric string
Number = Annotated[float, Field(strict=True, le=MAX_NUMBER)]
NonNegativeNumber = Annotated[float, Field(strict=True, ge=0, le=MAX_NUMBER, allow_inf_nan=False)]
