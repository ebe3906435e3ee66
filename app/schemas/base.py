# app/schemas/base.py
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema for everything that travels over the wire.

    Fields are declared in snake_case and exposed as lowerCamelCase JSON keys.
    Incoming payloads may use either spelling.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def as_utc(value: datetime | None) -> datetime | None:
    """
    Attach UTC to naive timestamps read back from stores that drop tzinfo
    (SQLite does).
    """
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
