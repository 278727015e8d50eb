from datetime import datetime, timezone
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach / convert to UTC.

    Timestamps are stored as UTC; sqlite hands them back naive, PostgreSQL
    hands them back aware. Either way the API renders them with an offset.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class ORMBase(BaseModel):
    """Base schema enabling attribute (ORM) population for Pydantic v2 models.

    Inherit from this class for any read/response schema that will be constructed
    directly from ORM / domain objects rather than plain dicts.
    """
    model_config = ConfigDict(from_attributes=True)
