"""
Catalog records: static reference data for templates and language models.
"""

from typing import Optional
from pydantic import BaseModel, Field


class Template(BaseModel):
    name: str
    lib: list[str] = Field(default_factory=list)
    file: str
    instructions: str
    port: Optional[int] = None

    model_config = {"frozen": True}


class LLMModel(BaseModel):
    id: str
    provider: str
    provider_id: str = Field(alias="providerId")
    name: str
    multi_modal: bool = Field(default=False, alias="multiModal")

    model_config = {"frozen": True, "populate_by_name": True}
