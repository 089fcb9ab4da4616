from ai_artifacts.models.artifact import Artifact, PartialArtifact
from ai_artifacts.models.catalog import LLMModel, Template
from ai_artifacts.models.message import Message, MessageMeta
from ai_artifacts.models.request import GenerationRequest, LLMModelConfig, RequestMessage
from ai_artifacts.models.result import ExecutionResult

__all__ = [
    "Artifact",
    "PartialArtifact",
    "LLMModel",
    "Template",
    "Message",
    "MessageMeta",
    "GenerationRequest",
    "LLMModelConfig",
    "RequestMessage",
    "ExecutionResult",
]
