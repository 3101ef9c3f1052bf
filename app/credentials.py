"""
API key storage.

Base64FileCredentialStore only *obfuscates* the key (base64 is reversible);
it is not a secret store. Callers depend on CredentialStore alone so a real
keyring backend can replace it without touching them.
"""

from __future__ import annotations
import base64
import binascii
import getpass
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

import config
from errors import MissingCredentialError

logger = logging.getLogger(__name__)

PROMPT = "Please enter your API key to continue. It is stored locally and not shared: "


class CredentialStore(ABC):
    @abstractmethod
    def load(self) -> str:
        """Stored key, or "" when there is none."""

    @abstractmethod
    def save(self, key: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    def has_key(self) -> bool:
        return bool(self.load())


class Base64FileCredentialStore(CredentialStore):
    """Key kept base64-encoded in a file. Obfuscation, not encryption."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path or config.get_credential_file())

    def load(self) -> str:
        if not self.path.exists():
            return ""
        try:
            return base64.b64decode(self.path.read_bytes(), validate=True).decode("utf-8").strip()
        except (binascii.Error, UnicodeDecodeError):
            logger.warning("Ignoring unreadable key file %s", self.path)
            return ""

    def save(self, key: str) -> None:
        if not key:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(base64.b64encode(key.encode("utf-8")))
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class EnvCredentialStore(CredentialStore):
    """Read-only: the key comes from the environment (or .env)."""

    def __init__(self, variable: str | None = None):
        self.variable = variable or config.get_api_key_env()

    def load(self) -> str:
        return os.getenv(self.variable, "").strip()

    def save(self, key: str) -> None:
        logger.debug("%s is read-only; not saving key", type(self).__name__)

    def clear(self) -> None:
        logger.debug("%s is read-only; nothing to clear", type(self).__name__)


class ChainedCredentialStore(CredentialStore):
    """First store with a key wins; saves go to the last (writable) store."""

    def __init__(self, *stores: CredentialStore):
        self.stores = stores

    def load(self) -> str:
        for store in self.stores:
            if key := store.load():
                return key
        return ""

    def save(self, key: str) -> None:
        self.stores[-1].save(key)

    def clear(self) -> None:
        for store in self.stores:
            store.clear()


def default_store(provider: str | None = None) -> CredentialStore:
    """Environment first, then the provider's key file."""
    return ChainedCredentialStore(
        EnvCredentialStore(config.get_api_key_env(provider)),
        Base64FileCredentialStore(config.get_credential_file(provider)),
    )


def ensure_api_key(
    store: CredentialStore,
    prompt: Optional[Callable[[str], str]] = getpass.getpass,
) -> str:
    """Stored key, or ask once and remember the answer."""
    key = store.load()
    if key:
        return key

    if prompt is not None:
        try:
            key = (prompt(PROMPT) or "").strip()
        except EOFError:  # no terminal to ask on
            key = ""
    if not key:
        raise MissingCredentialError("API key is required to call the generation API")

    store.save(key)
    return key
