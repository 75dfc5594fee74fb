"""Storage of private keys, in memory or on the file system."""

from __future__ import annotations

import base64
import binascii
import json
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass


class KeystoreError(Exception):
    """Raised when a keystore operation fails."""


class KeyNotFoundError(KeystoreError, LookupError):
    """Raised when a key does not exist."""


def key_name_to_base32(name: str) -> str:
    """Encode a key name as unpadded standard base32."""
    return base64.b32encode(name.encode("utf-8")).decode("ascii").rstrip("=")


def key_name_from_base32(encoded: str) -> str:
    """Decode a key name from unpadded standard base32."""
    padded = encoded + "=" * (-len(encoded) % 8)
    try:
        return base64.b32decode(padded).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise KeystoreError(
            f"keystore: can't convert base32 string to key name: {exc}"
        ) from exc


@dataclass(frozen=True)
class PrivKey:
    """A private key with an arbitrary body."""

    body: bytes = b""

    def to_json(self) -> bytes:
        """Serialize as a JSON object with the body in base64."""
        body = base64.b64encode(self.body).decode("ascii")
        return json.dumps({"body": body}, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_json(cls, data: bytes | str) -> PrivKey:
        """Parse a key serialized by ``to_json``."""
        try:
            obj = json.loads(data)
        except ValueError as exc:
            raise KeystoreError(f"keystore: invalid key JSON: {exc}") from exc
        if not isinstance(obj, dict):
            raise KeystoreError("keystore: key JSON must be an object")
        body = obj.get("body")
        if body is None:
            return cls(b"")
        if not isinstance(body, str):
            raise KeystoreError("keystore: key body must be a base64 string")
        try:
            return cls(base64.b64decode(body, validate=True))
        except binascii.Error as exc:
            raise KeystoreError(f"keystore: invalid key body: {exc}") from exc


class Keystore(ABC):
    """Manages private keys by name."""

    @abstractmethod
    def put(self, name: str, key: PrivKey) -> None:
        """Store ``key`` under ``name``; it must not exist yet."""

    @abstractmethod
    def get(self, name: str) -> PrivKey:
        """Return the key stored under ``name``."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Erase the key stored under ``name``."""

    @abstractmethod
    def list(self) -> list[str]:
        """Return the names of all stored keys."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Location of the keystore, empty when it has none."""


class MapKeystore(Keystore):
    """A thread-safe in-memory keystore."""

    def __init__(self) -> None:
        self._keys: dict[str, PrivKey] = {}
        self._lock = threading.Lock()

    def put(self, name: str, key: PrivKey) -> None:
        with self._lock:
            if name in self._keys:
                raise KeystoreError(f"keystore: key '{name}' already exists")
            self._keys[name] = key

    def get(self, name: str) -> PrivKey:
        with self._lock:
            try:
                return self._keys[name]
            except KeyError:
                raise KeyNotFoundError(f"keystore: key not found: {name}") from None

    def delete(self, name: str) -> None:
        with self._lock:
            if name not in self._keys:
                raise KeyNotFoundError(f"keystore: key '{name}' not found")
            del self._keys[name]

    def list(self) -> list[str]:
        with self._lock:
            return list(self._keys)

    @property
    def path(self) -> str:
        return ""


def _check_perms(mode: int) -> None:
    if mode & 0o077:
        raise KeystoreError(f"required: 0600, got: {oct(mode & 0o777)}")


class FSKeystore(Keystore):
    """A keystore keeping one file per key in a directory.

    The directory is created if necessary. File names are the base32-encoded
    key names; key files must not be accessible to group or others.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = os.fspath(path)
        try:
            os.mkdir(self._path, 0o755)
        except FileExistsError:
            pass
        except OSError as exc:
            raise KeystoreError(f"keystore: failed to make a dir: {exc}") from exc

    @property
    def path(self) -> str:
        return self._path

    def _path_to(self, name: str) -> str:
        return os.path.join(self._path, key_name_to_base32(name))

    def put(self, name: str, key: PrivKey) -> None:
        path = self._path_to(name)
        try:
            os.stat(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise KeystoreError(
                f"keystore: check before writing key '{name}' failed: {exc}"
            ) from exc
        else:
            raise KeystoreError(f"keystore: key '{name}' already exists")

        data = key.to_json()
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as file:
                file.write(data)
        except OSError as exc:
            raise KeystoreError(f"keystore: failed to write key '{name}': {exc}") from exc

    def get(self, name: str) -> PrivKey:
        path = self._path_to(name)
        try:
            st = os.stat(path)
        except FileNotFoundError:
            raise KeyNotFoundError(f"keystore: key not found: {name}") from None
        except OSError as exc:
            raise KeystoreError(
                f"keystore: check before reading key '{name}' failed: {exc}"
            ) from exc

        try:
            _check_perms(st.st_mode)
        except KeystoreError as exc:
            raise KeystoreError(
                f"keystore: permissions of key '{name}' are too relaxed: {exc}"
            ) from exc

        try:
            with open(path, "rb") as file:
                data = file.read()
        except OSError as exc:
            raise KeystoreError(f"keystore: failed read key '{name}': {exc}") from exc

        try:
            return PrivKey.from_json(data)
        except KeystoreError as exc:
            raise KeystoreError(
                f"keystore: failed to unmarshal key '{name}': {exc}"
            ) from exc

    def delete(self, name: str) -> None:
        path = self._path_to(name)
        try:
            os.stat(path)
        except FileNotFoundError:
            raise KeyNotFoundError(f"keystore: key '{name}' not found") from None
        except OSError as exc:
            raise KeystoreError(
                f"keystore: check before reading key '{name}' failed: {exc}"
            ) from exc
        try:
            os.remove(path)
        except OSError as exc:
            raise KeystoreError(f"keystore: failed to delete key '{name}': {exc}") from exc

    def list(self) -> list[str]:
        return [key_name_from_base32(entry) for entry in sorted(os.listdir(self._path))]