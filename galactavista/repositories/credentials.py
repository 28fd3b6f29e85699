"""
Persisted credential store.
A small async key/value store holding the bearer token and the serialized user.
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import aiofiles
import aiofiles.os

from galactavista.utils.exceptions import StorageError
import logging

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class CredentialRepository(ABC):
    """
    Base credential repository.
    Concrete stores implement the three key/value primitives; the credential
    helpers on top keep the ``token``/``user`` layout in one place.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""

    async def load_credentials(self) -> Tuple[Optional[str], Optional[str]]:
        """
        Read the persisted session.

        Returns:
            Tuple of (token, serialized user), either may be None
        """
        token = await self.get_item(TOKEN_KEY)
        user = await self.get_item(USER_KEY)
        return token, user

    async def save_credentials(self, token: str, user_json: str) -> None:
        """Write through a new token and user."""
        await self.set_item(TOKEN_KEY, token)
        await self.set_item(USER_KEY, user_json)

    async def save_user(self, user_json: str) -> None:
        """Replace the cached user, keeping the token."""
        await self.set_item(USER_KEY, user_json)

    async def clear_credentials(self) -> None:
        """Delete the persisted session."""
        await self.remove_item(TOKEN_KEY)
        await self.remove_item(USER_KEY)


class InMemoryCredentialRepository(CredentialRepository):
    """Process-local store, used for tests and short-lived scripts."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    @property
    def items(self) -> Dict[str, str]:
        return dict(self._items)


class FileCredentialRepository(CredentialRepository):
    """
    JSON file store.

    The whole file is a flat JSON object of string values. Writes go to a
    temporary file that replaces the original, and the file is readable by
    the owner only.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    async def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except OSError as e:
            raise StorageError(f"Cannot read credential store {self.path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageError(f"Credential store {self.path} is not valid UTF-8") from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Credential store {self.path} is not valid JSON") from e
        if not isinstance(data, dict):
            raise StorageError(f"Credential store {self.path} has an unexpected layout")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    async def _write_all(self, items: Dict[str, str]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(items))
            os.chmod(tmp_path, 0o600)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write credential store {self.path}: {e}") from e
        logger.debug(f"Credential store written: {self.path}")

    async def get_item(self, key: str) -> Optional[str]:
        async with self._lock:
            return (await self._read_all()).get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            items = await self._read_all()
            items[key] = value
            await self._write_all(items)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            try:
                items = await self._read_all()
            except StorageError:
                # an unreadable store is reset rather than left half-removed
                logger.warning(f"Resetting unreadable credential store: {self.path}")
                items = {}
            else:
                if key not in items:
                    return
                items.pop(key)
            await self._write_all(items)
