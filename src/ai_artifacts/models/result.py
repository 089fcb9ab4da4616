"""
Execution result: opaque payload returned by the sandbox backend.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ExecutionResult(BaseModel):
    """Known keys are typed loosely; anything else the backend sends is kept."""

    sbx_id: Optional[str] = Field(default=None, alias="sbxId")
    template: Optional[str] = None
    url: Optional[str] = None
    stdout: Optional[Any] = None
    stderr: Optional[Any] = None
    runtime_error: Optional[Any] = Field(default=None, alias="runtimeError")
    cell_results: Optional[list[Any]] = Field(default=None, alias="cellResults")

    model_config = {"populate_by_name": True, "extra": "allow"}
