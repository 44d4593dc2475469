"""Helpers for turning query parameters into typed filter objects."""

from typing import Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError

FilterT = TypeVar("FilterT", bound=BaseModel)


def build_filter(filter_cls: Type[FilterT], **values: Optional[str]) -> FilterT:
    """Build a filter from raw query values.

    Blank values mean "no filter". Unknown enumeration tokens raise
    ValidationError.
    """
    cleaned = {
        key: (value.strip() or None) if isinstance(value, str) else value
        for key, value in values.items()
    }
    try:
        return filter_cls(**cleaned)
    except PydanticValidationError as e:
        messages = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError("; ".join(messages)) from e
