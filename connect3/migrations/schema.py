"""Versioned shapes of the persisted document.

Each supported schema version has its own model. A raw document is parsed
into exactly one of them by looking at its ``version`` field, so a
transform always knows the precise shape it receives and returns.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter

from connect3.domain.fields import NullableStr, TagList, null_as_empty_list


class _Record(BaseModel):
    # Fields this version does not know about are carried along untouched.
    model_config = ConfigDict(extra="allow")


class PersonV0_0_1(_Record):
    id: str = ""
    name: NullableStr = ""
    notes: NullableStr = ""
    tags: list[str] | None = None


class PersonV1_0_0(_Record):
    id: str = ""
    name: NullableStr = ""
    notes: NullableStr = ""
    tags: TagList = []


class RelationRecord(_Record):
    id: NullableStr = ""
    from_id: NullableStr = ""
    to_id: NullableStr = ""
    strength: int = 0
    description: NullableStr = ""


class DocumentV0_0_1(_Record):
    version: Literal["0.0.1"] = "0.0.1"
    people: Annotated[list[PersonV0_0_1], BeforeValidator(null_as_empty_list)] = []
    relations: Annotated[list[RelationRecord], BeforeValidator(null_as_empty_list)] = []


class DocumentV1_0_0(_Record):
    version: Literal["1.0.0"] = "1.0.0"
    people: Annotated[list[PersonV1_0_0], BeforeValidator(null_as_empty_list)] = []
    relations: Annotated[list[RelationRecord], BeforeValidator(null_as_empty_list)] = []


VersionedDocument = Annotated[
    Union[DocumentV0_0_1, DocumentV1_0_0],
    Field(discriminator="version"),
]

versioned_document_adapter: TypeAdapter[VersionedDocument] = TypeAdapter(VersionedDocument)
