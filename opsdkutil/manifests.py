"""Splitting, inspecting and cleaning Kubernetes manifests."""

from __future__ import annotations

import copy
import dataclasses
import io
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

import yaml

# Environment variable holding the kubeconfig file path.
KUBECONFIG_ENV_VAR = "KUBECONFIG"
# Environment variable naming the watched namespace; empty when cluster scoped.
WATCH_NAMESPACE_ENV_VAR = "WATCH_NAMESPACE"

_SEPARATOR = b"---"
_MAX_SUCCESSIVE_EMPTIES = 100
_RUNTIME_MANAGED_KEYS = ("status", "creationTimestamp")


@dataclass(frozen=True)
class TypeMeta:
    """The apiVersion and kind of a manifest."""

    api_version: str = ""
    kind: str = ""

    def _group_version(self) -> tuple[str, str]:
        if not self.api_version:
            return "", ""
        parts = self.api_version.split("/")
        if len(parts) == 1:
            return "", parts[0]
        if len(parts) == 2:
            return parts[0], parts[1]
        return "", ""

    @property
    def group(self) -> str:
        return self._group_version()[0]

    @property
    def version(self) -> str:
        return self._group_version()[1]


def _iter_lines(stream: Any) -> Iterator[bytes]:
    if isinstance(stream, str):
        stream = stream.encode()
    if isinstance(stream, (bytes, bytearray, memoryview)):
        stream = io.BytesIO(bytes(stream))
    for line in stream:
        yield line.encode() if isinstance(line, str) else bytes(line)


def _read_documents(lines: Iterator[bytes]) -> Iterator[bytes]:
    """Yield raw chunks of a multi-document YAML stream delimited by "---" lines."""
    buffer = bytearray()
    for line in lines:
        if line.startswith(_SEPARATOR):
            trailing = line[len(_SEPARATOR):].strip()
            if trailing and not trailing.startswith(b"#"):
                raise ValueError(
                    "invalid YAML document separator: "
                    + trailing.decode(errors="replace")
                )
            if buffer:
                yield bytes(buffer)
                buffer.clear()
                continue
        buffer.extend(line)
    if buffer:
        yield bytes(buffer)


class YAMLScanner:
    """Scan a YAML stream for manifests delimited by "---", skipping blank ones."""

    def __init__(self, stream: Any) -> None:
        self._documents = _read_documents(_iter_lines(stream))
        self._token = b""
        self._empties = 0
        self._done = False

    def __iter__(self) -> Iterator[bytes]:
        while self.scan():
            yield self._token

    def scan(self) -> bool:
        """Advance to the next non-blank manifest; return False when exhausted."""
        if self._done:
            return False
        while True:
            try:
                token = next(self._documents)
            except StopIteration:
                self._done = True
                return False
            except ValueError:
                self._done = True
                raise
            if not token.strip():
                self._empties += 1
                if self._empties > _MAX_SUCCESSIVE_EMPTIES:
                    raise RuntimeError(
                        "yaml scan: too many empty tokens without progressing"
                    )
                continue
            self._empties = 0
            self._token = token
            return True

    def text(self) -> str:
        return self._token.decode()

    def bytes(self) -> bytes:
        return self._token


def _string_field(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else ""


def get_type_meta_from_bytes(data: bytes | str) -> TypeMeta:
    """Return the TypeMeta of a single manifest held in data."""
    prefix = "error getting TypeMeta from bytes"
    try:
        documents = list(YAMLScanner(data))
    except ValueError as exc:
        raise ValueError(f"{prefix}: {exc}") from exc
    if len(documents) > 1:
        raise ValueError(f"{prefix}: more than one manifest in file")
    if not documents:
        return TypeMeta()
    try:
        obj = yaml.safe_load(documents[0])
    except yaml.YAMLError as exc:
        raise ValueError(f"{prefix}: {exc}") from exc
    if obj is None:
        return TypeMeta()
    if not isinstance(obj, Mapping):
        raise ValueError(f"{prefix}: manifest is not an object")
    return TypeMeta(
        api_version=_string_field(obj, "apiVersion"),
        kind=_string_field(obj, "kind"),
    )


def delete_key(obj: MutableMapping[str, Any], key: str) -> None:
    """Remove key from obj; if absent there, remove it from nested objects instead."""
    if key in obj:
        del obj[key]
        return
    for value in obj.values():
        if isinstance(value, MutableMapping):
            delete_key(value, key)
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, MutableMapping):
                    delete_key(item, key)


def get_object_bytes(obj: Any, marshal: Callable[[dict[str, Any]], Any]) -> Any:
    """Marshal obj with runtime-managed fields ('status', 'creationTimestamp') removed."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        data = dataclasses.asdict(obj)
    elif isinstance(obj, Mapping):
        data = copy.deepcopy(dict(obj))
    else:
        raise TypeError(f"cannot convert {type(obj).__name__} to an unstructured object")
    for key in _RUNTIME_MANAGED_KEYS:
        delete_key(data, key)
    return marshal(data)