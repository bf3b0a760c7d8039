"""The persisted aggregate."""

import json
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator

from connect3.config import DB_FORMAT_VERSION
from connect3.domain.fields import null_as_empty_list
from connect3.domain.person import Person
from connect3.domain.relation import Relation


class Document(BaseModel):
    """Everything that is written to the store file.

    Attributes:
        version: Schema version the document was written with
        people: People in insertion order
        relations: Relations in insertion order
    """

    version: str = DB_FORMAT_VERSION
    people: Annotated[list[Person], BeforeValidator(null_as_empty_list)] = []
    relations: Annotated[list[Relation], BeforeValidator(null_as_empty_list)] = []


def dump_document(data: dict[str, Any]) -> bytes:
    """Serialize a document the way the store file is laid out."""
    return json.dumps(data, indent=1, ensure_ascii=False).encode("utf-8")
