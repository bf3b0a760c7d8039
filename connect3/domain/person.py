"""Person domain model."""

from pydantic import BaseModel

from connect3.domain.fields import NullableStr, TagList


class Person(BaseModel):
    """Represents somebody worth remembering.

    Attributes:
        id: Unique identifier generated on creation, never changed afterwards
        name: Display name
        notes: Free text notes
        tags: Distinct tag strings, compared case-sensitively
    """

    id: str
    name: NullableStr = ""
    notes: NullableStr = ""
    tags: TagList = []
