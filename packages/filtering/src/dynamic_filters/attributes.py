"""
Attribute codecs: typed encode/decode for special columns.

An entity declares which of its attributes need special handling::

    class User(Base):
        json_columns = ("settings",)
        boolean_columns = ("is_active",)
        password_columns = ("password",)
        file_columns = ("avatar",)
        file_storage_options = {"disk": "s3", "directory": "public/avatars"}

:class:`AttributeTable` resolves those declarations once per entity into a
codec per attribute.  ``encode`` runs on the way into storage (mass
assignment, updates), ``decode`` on the way out (serialization).
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .hashing import PasswordHasher

if TYPE_CHECKING:
    from collections.abc import Mapping

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


class AttributeKind(str, Enum):
    PLAIN = "plain"
    JSON = "json"
    FILE = "file"
    BOOLEAN = "boolean"
    PASSWORD = "password"


@dataclass(frozen=True)
class StoredFile:
    """Where a media collaborator put an uploaded file."""

    directory: str
    file_name: str


@runtime_checkable
class MediaStorage(Protocol):
    """External collaborator that persists uploaded files."""

    def store(
        self, file: Any, *, disk: str | None = None, directory: str | None = None
    ) -> StoredFile: ...


class AttributeCodec(ABC):
    """Strategy interface: one codec per attribute kind."""

    kind: AttributeKind

    @abstractmethod
    def encode(self, value: Any) -> Any:
        """Application value -> stored value."""
        ...

    @abstractmethod
    def decode(self, stored: Any) -> Any:
        """Stored value -> application value."""
        ...


class PlainCodec(AttributeCodec):
    kind = AttributeKind.PLAIN

    def encode(self, value: Any) -> Any:
        return value

    def decode(self, stored: Any) -> Any:
        return stored


class JsonCodec(AttributeCodec):
    """Lists and dicts are stored as JSON text; anything else is stored as given."""

    kind = AttributeKind.JSON

    def encode(self, value: Any) -> Any:
        if isinstance(value, dict | list):
            return json.dumps(value)
        return value

    def decode(self, stored: Any) -> Any:
        if stored is None:
            return None
        if isinstance(stored, str | bytes):
            return json.loads(stored)
        return stored


class BooleanCodec(AttributeCodec):
    kind = AttributeKind.BOOLEAN

    def encode(self, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_STRINGS
        return bool(value)

    def decode(self, stored: Any) -> bool:
        return bool(stored or False)


class PasswordCodec(AttributeCodec):
    """Hashes on write; the stored hash is returned as-is on read."""

    kind = AttributeKind.PASSWORD

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._hasher = hasher or PasswordHasher()

    def encode(self, value: Any) -> Any:
        if value is None:
            return None
        return self._hasher.hash(str(value))

    def decode(self, stored: Any) -> Any:
        return stored


class FileCodec(AttributeCodec):
    """
    Uploads go through :class:`MediaStorage`; the relative path is stored and
    read back as ``media_url + path``.

    A string value is taken to be an already-stored relative path.
    """

    kind = AttributeKind.FILE

    def __init__(
        self,
        storage: MediaStorage | None = None,
        *,
        media_url: str = "",
        disk: str | None = None,
        directory: str | None = None,
    ) -> None:
        self._storage = storage
        self._media_url = media_url
        self._disk = disk
        self._directory = directory

    def encode(self, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if self._storage is None:
            raise RuntimeError("No MediaStorage configured for file attributes")
        stored = self._storage.store(value, disk=self._disk, directory=self._directory)
        directory = stored.directory.replace("public/", "")
        return f"{directory}/{stored.file_name}"

    def decode(self, stored: Any) -> str | None:
        if not stored:
            return None
        return f"{self._media_url}{stored}"


_PLAIN = PlainCodec()


class AttributeTable:
    """Codec per attribute name for one entity; unlisted attributes are plain."""

    def __init__(self, codecs: Mapping[str, AttributeCodec] | None = None) -> None:
        self._codecs = dict(codecs or {})

    @classmethod
    def for_entity(
        cls,
        entity_type: Any,
        *,
        hasher: PasswordHasher | None = None,
        storage: MediaStorage | None = None,
        media_url: str = "",
    ) -> AttributeTable:
        """Resolve the entity's ``*_columns`` declarations into codecs."""
        codecs: dict[str, AttributeCodec] = {}
        for name in getattr(entity_type, "json_columns", ()):
            codecs[name] = JsonCodec()
        for name in getattr(entity_type, "boolean_columns", ()):
            codecs[name] = BooleanCodec()
        password_codec = PasswordCodec(hasher)
        for name in getattr(entity_type, "password_columns", ()):
            codecs[name] = password_codec
        options = getattr(entity_type, "file_storage_options", None) or {}
        file_codec = FileCodec(
            storage,
            media_url=media_url,
            disk=options.get("disk"),
            directory=options.get("directory"),
        )
        for name in getattr(entity_type, "file_columns", ()):
            codecs[name] = file_codec
        return cls(codecs)

    def codec(self, name: str) -> AttributeCodec:
        return self._codecs.get(name, _PLAIN)

    def kind(self, name: str) -> AttributeKind:
        return self.codec(name).kind

    def encode(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {name: self.codec(name).encode(value) for name, value in data.items()}

    def decode(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {name: self.codec(name).decode(value) for name, value in data.items()}


__all__ = [
    "AttributeCodec",
    "AttributeKind",
    "AttributeTable",
    "BooleanCodec",
    "FileCodec",
    "JsonCodec",
    "MediaStorage",
    "PasswordCodec",
    "PlainCodec",
    "StoredFile",
]
