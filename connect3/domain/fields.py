"""Field types for store files written with JSON null in place of empty values."""

from typing import Annotated, Any

from pydantic import BeforeValidator


def null_as_empty_string(x: Any) -> Any:
    return "" if x is None else x


def null_as_empty_list(x: Any) -> Any:
    return [] if x is None else x


NullableStr = Annotated[str, BeforeValidator(null_as_empty_string)]
TagList = Annotated[list[str], BeforeValidator(null_as_empty_list)]
