from connect3.domain.document import Document, dump_document
from connect3.domain.person import Person
from connect3.domain.relation import (
    MAX_STRENGTH,
    MIN_STRENGTH,
    Direction,
    Relation,
    RelationView,
    clamp_strength,
)

__all__ = [
    "Direction",
    "Document",
    "MAX_STRENGTH",
    "MIN_STRENGTH",
    "Person",
    "Relation",
    "RelationView",
    "clamp_strength",
    "dump_document",
]
