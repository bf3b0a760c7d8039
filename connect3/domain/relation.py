"""Relation domain models."""

from enum import Enum

from pydantic import BaseModel

from connect3.domain.fields import NullableStr

MIN_STRENGTH = 1
MAX_STRENGTH = 5


def clamp_strength(strength: int) -> int:
    """Force a strength value into the closed range [1, 5]."""
    return max(MIN_STRENGTH, min(MAX_STRENGTH, strength))


class Relation(BaseModel):
    """A directed, weighted connection from one person to another.

    Strength is clamped when a relation is committed, not when it is loaded,
    so legacy documents may carry values outside [1, 5].
    """

    id: NullableStr = ""
    from_id: NullableStr
    to_id: NullableStr
    strength: int = MIN_STRENGTH
    description: NullableStr = ""


class Direction(str, Enum):
    OUTGOING = "->"
    INCOMING = "<-"


class RelationView(BaseModel):
    """A relation seen from one of its endpoints."""

    relation: Relation
    other_name: str
    direction: Direction
