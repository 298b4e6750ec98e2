"""Base model shared by every engine state type.

State values are immutable: mutators build a new instance with
``model_copy(update=...)`` and return it. Attributes are snake_case in
Python and camelCase in the snapshot document.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Frozen pydantic model with camelCase document aliases.

    Range rules are not enforced here. Validators in the mechanics,
    psionics and spellcasting packages report every violation at once,
    so models accept any well-typed value.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def evolve(self, **changes: Any) -> Any:
        """Return a copy with the given fields replaced.

        Args:
            **changes: Field values keyed by Python attribute name.

        Returns:
            A new instance of the same model.
        """
        return self.model_copy(update=changes)

    def to_document(self) -> dict[str, Any]:
        """Dump the model as a JSON-compatible camelCase document.

        Returns:
            Dictionary of aliased keys and JSON values.
        """
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["EngineModel"]
