"""
Base Model
==========
Shared configuration and utilities for all instapull models.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InstaModel(BaseModel):
    """
    Base model for all result models.

    Features:
        - frozen=True: results are built once and never mutated
        - camelCase aliases: JSON wire names (sourceUrl, postKind, ...)
        - populate_by_name=True: fields can be set by snake_case name or alias
        - .to_dict(): JSON-ready dict using wire names
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        from_attributes=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
