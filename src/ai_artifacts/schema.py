"""
Artifact validator.

Partial snapshots are never checked while streaming; this is the strict check
applied once, when the stream completes, before anything is executed.
"""

from collections.abc import Container
from typing import Any, Optional, Union

from pydantic import ValidationError

from ai_artifacts.errors import SchemaMismatch
from ai_artifacts.models.artifact import Artifact, PartialArtifact

REQUIRED_FIELDS = ("commentary", "template", "title", "description", "code")


def validate_artifact(
    candidate: Union[PartialArtifact, dict[str, Any], None],
    templates: Optional[Container[str]] = None,
) -> Artifact:
    """Return the complete artifact or raise SchemaMismatch."""
    if candidate is None:
        raise SchemaMismatch("Generation finished without an artifact")
    if isinstance(candidate, PartialArtifact):
        data = {k: v for k, v in candidate.model_dump(warnings=False).items() if v is not None}
    elif isinstance(candidate, dict):
        data = candidate
    else:
        raise SchemaMismatch(f"Expected an object, got {type(candidate).__name__}")

    try:
        artifact = Artifact.model_validate(data, strict=True)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_input=False)
        missing = [".".join(str(p) for p in err["loc"]) for err in errors if err["type"] == "missing"]
        message = f"Missing required fields: {', '.join(missing)}" if missing else "Artifact fields have the wrong type"
        raise SchemaMismatch(message, details={"errors": errors})

    if templates is not None and artifact.template not in templates:
        raise SchemaMismatch(f"Unknown template: {artifact.template}", details={"template": artifact.template})
    return artifact
