"""
ExecutionDispatcher: sends a finished artifact to the sandbox backend.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from ai_artifacts.errors import ArtifactsError, ExecutionError
from ai_artifacts.models.artifact import Artifact
from ai_artifacts.models.result import ExecutionResult
from ai_artifacts.transport.http import HttpClient

logger = logging.getLogger(__name__)

EXECUTION_PATH = "/sandbox"


class ExecutionDispatcher:
    def __init__(self, http: HttpClient, path: str = EXECUTION_PATH):
        self._http = http
        self._path = path

    async def execute(self, artifact: Artifact, user_id: str, api_key: Optional[str]) -> ExecutionResult:
        """Run ``artifact`` once. No retry: a failure is final for this submission."""
        body = {"artifact": artifact.model_dump(), "userID": user_id, "apiKey": api_key}
        try:
            data = await self._http.post(self._path, body)
        except ArtifactsError as e:
            logger.error("Execution of %r failed: %s", artifact.title, e)
            raise ExecutionError(f"Sandbox request failed: {e}", details={"cause": e.code, **(e.details or {})})
        if not isinstance(data, dict):
            raise ExecutionError(f"Sandbox returned {type(data).__name__}, expected an object")
        try:
            return ExecutionResult.model_validate(data)
        except ValidationError as e:
            raise ExecutionError(f"Sandbox returned an unexpected result: {e.error_count()} errors", details={"errors": e.errors(include_url=False)})
