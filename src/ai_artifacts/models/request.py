"""
Generation request models: the JSON body posted to the generation endpoint.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field

from ai_artifacts.models.message import Role


class LLMModelConfig(BaseModel):
    """Per-user model settings, persisted in preferences under ``languageModel``."""

    model: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    base_url: Optional[str] = Field(default=None, alias="baseURL")
    temperature: Optional[float] = None
    top_p: Optional[float] = Field(default=None, alias="topP")
    top_k: Optional[int] = Field(default=None, alias="topK")
    frequency_penalty: Optional[float] = Field(default=None, alias="frequencyPenalty")
    presence_penalty: Optional[float] = Field(default=None, alias="presencePenalty")
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens")

    model_config = {"populate_by_name": True, "protected_namespaces": ()}

    def merged(self, **changes: Any) -> "LLMModelConfig":
        """Return a copy with ``changes`` applied on top (field or wire names)."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        data.update(LLMModelConfig(**changes).model_dump(by_alias=True, exclude_unset=True))
        return LLMModelConfig.model_validate(data)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RequestMessage(BaseModel):
    role: Role
    content: str


class GenerationRequest(BaseModel):
    user_id: str = Field(alias="userID")
    messages: list[RequestMessage]
    template: dict[str, Any]
    model: Optional[dict[str, Any]] = None
    config: LLMModelConfig = Field(default_factory=LLMModelConfig)

    model_config = {"populate_by_name": True, "protected_namespaces": ()}

    def to_wire(self) -> dict[str, Any]:
        return {
            "userID": self.user_id,
            "messages": [m.model_dump() for m in self.messages],
            "template": self.template,
            "model": self.model,
            "config": self.config.to_wire(),
        }
