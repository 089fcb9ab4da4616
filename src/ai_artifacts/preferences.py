"""
Preference storage: pending chat input and model settings, kept across runs.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ai_artifacts.models.request import LLMModelConfig

logger = logging.getLogger(__name__)

CHAT_INPUT_KEY = "chat"
LANGUAGE_MODEL_KEY = "languageModel"
DEFAULT_MODEL_ID = "claude-3-5-sonnet-20240620"


class PreferenceStore:
    """Key-value store persisted as JSON. ``path=None`` keeps values in memory only."""

    def __init__(self, path: Optional[Path] = None):
        self._path = path
        self._values: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if self._path is None:
            return {}
        try:
            data = json.loads(self._path.read_text())
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable preferences file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._values, indent=2))

    @property
    def chat_input(self) -> str:
        value = self.get(CHAT_INPUT_KEY, "")
        return value if isinstance(value, str) else ""

    @chat_input.setter
    def chat_input(self, value: str) -> None:
        self.set(CHAT_INPUT_KEY, value)

    @property
    def language_model(self) -> LLMModelConfig:
        raw = self.get(LANGUAGE_MODEL_KEY)
        if not isinstance(raw, dict):
            return LLMModelConfig(model=DEFAULT_MODEL_ID)
        return LLMModelConfig.model_validate(raw)

    @language_model.setter
    def language_model(self, config: LLMModelConfig) -> None:
        self.set(LANGUAGE_MODEL_KEY, config.to_wire())
