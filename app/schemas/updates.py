"""
Partial Update Base
PATCH bodies where omitted fields are untouched and null only clears optional fields.
"""

from typing import Any, ClassVar, Dict, FrozenSet

from pydantic import BaseModel


class PartialUpdateRequest(BaseModel):
    """Base for PATCH request bodies."""

    # Fields whose stored value may legitimately be cleared with null
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self, **dump_kwargs: Any) -> Dict[str, Any]:
        """Fields the client sent, minus nulls aimed at required document fields."""
        data = self.model_dump(exclude_unset=True, **dump_kwargs)
        return {key: value for key, value in data.items() if value is not None or key in self.nullable_fields}
