"""
Artifact models: the structured generation target.

``PartialArtifact`` is what arrives mid-stream: every field optional, each
snapshot a full replacement of the previous one. ``Artifact`` is the complete
form that is allowed to reach the execution backend.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class PartialArtifact(BaseModel):
    commentary: Optional[str] = None
    template: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    additional_dependencies: Optional[list[Optional[str]]] = None
    has_additional_dependencies: Optional[bool] = None
    install_dependencies_command: Optional[str] = None
    port: Optional[int] = None
    file_path: Optional[str] = None
    code: Optional[str] = None

    model_config = {"extra": "allow"}

    @classmethod
    def from_snapshot(cls, data: Any) -> PartialArtifact:
        """Build a partial from a decoded snapshot without ever rejecting it.

        Values that do not fit the field types yet are kept as-is so the
        finalization check can report them.
        """
        if isinstance(data, PartialArtifact):
            return data
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError:
            logger.debug("Partial snapshot does not match field types yet: %r", sorted(data))
            return cls.model_construct(**data)

    def text(self, field: str) -> str:
        """Field value as display text; empty when absent or not a string."""
        value = getattr(self, field, None)
        return value if isinstance(value, str) else ""


class Artifact(BaseModel):
    commentary: str
    template: str
    title: str
    description: str
    code: str
    file_path: Optional[str] = None
    additional_dependencies: list[str] = Field(default_factory=list)
    has_additional_dependencies: bool = False
    install_dependencies_command: str = ""
    port: Optional[int] = None

    model_config = {"extra": "ignore"}
