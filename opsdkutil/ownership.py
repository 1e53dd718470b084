"""Decide whether a dependent resource may carry an owner reference."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from opsdkutil.manifests import TypeMeta


class RESTScope(Enum):
    """Scope of a resource kind."""

    NAMESPACE = "namespace"
    ROOT = "root"


class NoKindMatchError(LookupError):
    """Raised when a mapper knows nothing of a group, version and kind."""

    def __init__(self, group: str, version: str, kind: str) -> None:
        group_version = f"{group}/{version}" if group else version
        super().__init__(f'no matches for kind "{kind}" in version "{group_version}"')
        self.group = group
        self.version = version
        self.kind = kind


class RESTMapper:
    """Maps resource kinds to their scope."""

    def __init__(self) -> None:
        self._scopes: dict[tuple[str, str, str], RESTScope] = {}

    def add(self, group: str, version: str, kind: str, scope: RESTScope | str) -> None:
        self._scopes[(group, version, kind)] = RESTScope(scope)

    def scope_for(self, group: str, version: str, kind: str) -> RESTScope:
        try:
            return self._scopes[(group, version, kind)]
        except KeyError:
            raise NoKindMatchError(group, version, kind) from None


def _type_meta(obj: Mapping[str, Any]) -> TypeMeta:
    api_version = obj.get("apiVersion")
    kind = obj.get("kind")
    return TypeMeta(
        api_version=api_version if isinstance(api_version, str) else "",
        kind=kind if isinstance(kind, str) else "",
    )


def _scope(rest_mapper: RESTMapper, obj: Mapping[str, Any]) -> RESTScope:
    meta = _type_meta(obj)
    return rest_mapper.scope_for(meta.group, meta.version, meta.kind)


def _namespace(obj: Mapping[str, Any]) -> str:
    metadata = obj.get("metadata")
    if not isinstance(metadata, Mapping):
        return ""
    namespace = metadata.get("namespace")
    return namespace if isinstance(namespace, str) else ""


def supports_owner_reference(
    rest_mapper: RESTMapper,
    owner: Mapping[str, Any],
    dependent: Mapping[str, Any],
    dep_namespace: str = "",
) -> bool:
    """Return whether dependent may be owned by owner.

    True when the owner is cluster scoped, or both are namespaced in the same
    namespace; False when only the dependent is cluster scoped or the
    namespaces differ. The dependent's namespace is taken from dep_namespace
    when given, else from its metadata. Unknown kinds raise NoKindMatchError.
    """
    owner_scope = _scope(rest_mapper, owner)
    dependent_scope = _scope(rest_mapper, dependent)
    if owner_scope is RESTScope.ROOT:
        return True
    if dependent_scope is RESTScope.ROOT:
        return False
    namespace = dep_namespace or _namespace(dependent)
    return _namespace(owner) == namespace