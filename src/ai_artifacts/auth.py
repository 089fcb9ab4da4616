"""
Identity collaborator.

The orchestrator only asks two questions: who is signed in, and which API key
to forward to the sandbox. ``None`` for the user means the submission waits.
"""

from typing import Any, Optional, Protocol

from pydantic import BaseModel

from ai_artifacts.config import load_config, save_config


class User(BaseModel):
    id: str
    email: Optional[str] = None


class Identity(Protocol):
    def current_user(self) -> Optional[User]: ...

    def api_key(self) -> Optional[str]: ...

    def sign_out(self) -> None: ...


class StaticIdentity:
    """In-memory identity, for embedding and tests."""

    def __init__(self, user_id: Optional[str] = None, api_key: Optional[str] = None, email: Optional[str] = None):
        self._user = User(id=user_id, email=email) if user_id else None
        self._api_key = api_key

    def sign_in(self, user_id: str, api_key: Optional[str] = None, email: Optional[str] = None) -> User:
        self._user = User(id=user_id, email=email)
        self._api_key = api_key
        return self._user

    def current_user(self) -> Optional[User]:
        return self._user

    def api_key(self) -> Optional[str]:
        return self._api_key

    def sign_out(self) -> None:
        self._user = None
        self._api_key = None


class StoredIdentity:
    """Identity backed by the CLI config file. Re-read on every call."""

    CREDENTIAL_KEYS = ("user_id", "api_key", "email")

    def _config(self) -> dict[str, Any]:
        return load_config()

    def sign_in(self, user_id: str, api_key: Optional[str] = None, email: Optional[str] = None) -> User:
        cfg = self._config()
        cfg.update({"user_id": user_id, "api_key": api_key, "email": email})
        save_config(cfg)
        return User(id=user_id, email=email)

    def current_user(self) -> Optional[User]:
        cfg = self._config()
        if not cfg.get("user_id"):
            return None
        return User(id=cfg["user_id"], email=cfg.get("email"))

    def api_key(self) -> Optional[str]:
        return self._config().get("api_key")

    def sign_out(self) -> None:
        cfg = {k: v for k, v in self._config().items() if k not in self.CREDENTIAL_KEYS}
        save_config(cfg)
