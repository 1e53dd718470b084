"""Reading CustomResourceDefinition manifests and deriving their keys."""

from __future__ import annotations

import copy
import functools
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any

import yaml

from opsdkutil.manifests import YAMLScanner, get_type_meta_from_bytes

log = logging.getLogger(__name__)

CRD_KIND = "CustomResourceDefinition"
V1_API_VERSION = "apiextensions.k8s.io/v1"

_KUBE_VERSION_RE = re.compile(r"v([0-9]+)(?:(alpha|beta)([0-9]+))?")


@dataclass(frozen=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


@dataclass(frozen=True)
class DefinitionKey:
    name: str
    group: str
    version: str
    kind: str


class DuplicateGVKError(ValueError):
    """Raised when two CRDs define the same group, version and kind."""


class _VersionType(IntEnum):
    ALPHA = 0
    BETA = 1
    GA = 2


def _parse_kube_version(value: str) -> tuple[int, _VersionType, int] | None:
    match = _KUBE_VERSION_RE.fullmatch(value)
    if match is None:
        return None
    major, stage, minor = match.groups()
    if stage is None:
        return int(major), _VersionType.GA, 0
    return int(major), _VersionType[stage.upper()], int(minor)


def compare_kube_aware_version_strings(v1: str, v2: str) -> int:
    """Compare versions the Kubernetes way; positive when v1 is the greater one.

    GA beats beta beats alpha, then higher major and minor numbers win.
    Kube-like versions beat all others, which compare in reverse lexical order.
    """
    if v1 == v2:
        return 0
    parsed1 = _parse_kube_version(v1)
    parsed2 = _parse_kube_version(v2)
    if parsed1 is None and parsed2 is None:
        return (v2 > v1) - (v2 < v1)
    if parsed1 is None:
        return -1
    if parsed2 is None:
        return 1
    major1, type1, minor1 = parsed1
    major2, type2, minor2 = parsed2
    if type1 != type2:
        return int(type1) - int(type2)
    if major1 != major2:
        return major1 - major2
    return minor1 - minor2


def _version_name(version: Any) -> str:
    if isinstance(version, str):
        return version
    return str(version.get("name", ""))


def sort_crd_versions(versions: Iterable[Any]) -> list[Any]:
    """Sort CRD versions (mappings with a "name", or names) from greatest to least."""
    return sorted(
        versions,
        key=functools.cmp_to_key(
            lambda a, b: -compare_kube_aware_version_strings(
                _version_name(a), _version_name(b)
            )
        ),
    )


def _crd_identity(crd: Mapping[str, Any]) -> tuple[str, str, str, Mapping[str, Any]]:
    metadata = crd.get("metadata") or {}
    spec = crd.get("spec") or {}
    names = spec.get("names") or {}
    return metadata.get("name", ""), spec.get("group", ""), names.get("kind", ""), spec


def _served_keys(
    name: str, group: str, kind: str, versions: Iterable[Mapping[str, Any]]
) -> list[DefinitionKey]:
    keys = []
    for version in versions:
        if not version.get("served"):
            log.debug(
                "Not adding unserved CRD %r version %r to set of owned keys",
                name,
                version.get("name", ""),
            )
            continue
        keys.append(DefinitionKey(name, group, version.get("name", ""), kind))
    return keys


def definitions_for_v1_crds(*crds: Mapping[str, Any]) -> list[DefinitionKey]:
    """Definition keys for every served version of each v1 CRD."""
    keys: list[DefinitionKey] = []
    for crd in crds:
        name, group, kind, spec = _crd_identity(crd)
        keys.extend(_served_keys(name, group, kind, spec.get("versions") or []))
    return keys


def definitions_for_v1beta1_crds(*crds: Mapping[str, Any]) -> list[DefinitionKey]:
    """Definition keys for each v1beta1 CRD: its served versions, or its single version."""
    keys: list[DefinitionKey] = []
    for crd in crds:
        name, group, kind, spec = _crd_identity(crd)
        versions = spec.get("versions") or []
        if not versions:
            keys.append(DefinitionKey(name, group, spec.get("version", ""), kind))
        keys.extend(_served_keys(name, group, kind, versions))
    return keys


def _to_gvks(keys: Iterable[DefinitionKey]) -> list[GroupVersionKind]:
    return [GroupVersionKind(key.group, key.version, key.kind) for key in keys]


def gvks_for_v1_crds(*crds: Mapping[str, Any]) -> list[GroupVersionKind]:
    return _to_gvks(definitions_for_v1_crds(*crds))


def gvks_for_v1beta1_crds(*crds: Mapping[str, Any]) -> list[GroupVersionKind]:
    return _to_gvks(definitions_for_v1beta1_crds(*crds))


def get_custom_resource_definitions(
    crds_dir: str | Path,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Return the (v1, v1beta1) CRD manifests in the files of crds_dir.

    Raises DuplicateGVKError if two CRDs define the same custom resource GVK.
    """
    v1_crds: list[dict[str, Any]] = []
    v1beta1_crds: list[dict[str, Any]] = []
    seen: set[GroupVersionKind] = set()

    for path in sorted(Path(crds_dir).iterdir(), key=lambda p: p.name):
        if path.is_dir():
            log.debug("Skipping dir: %s", path)
            continue
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise OSError(f"error reading manifest {path}: {exc}") from exc

        try:
            manifests = list(YAMLScanner(data))
        except ValueError as exc:
            raise ValueError(f"error scanning {path}: {exc}") from exc

        for manifest in manifests:
            try:
                type_meta = get_type_meta_from_bytes(manifest)
            except ValueError as exc:
                log.debug("Skipping manifest in %s: %s", path, exc)
                continue
            if type_meta.kind != CRD_KIND:
                continue

            try:
                crd = yaml.safe_load(manifest)
            except yaml.YAMLError as exc:
                raise ValueError(f"error decoding CRD in {path}: {exc}") from exc

            if type_meta.version == "v1":
                v1_crds.append(crd)
                gvks = gvks_for_v1_crds(crd)
            elif type_meta.version == "v1beta1":
                v1beta1_crds.append(crd)
                gvks = gvks_for_v1beta1_crds(crd)
            else:
                raise ValueError(
                    f"unrecognized CustomResourceDefinition version {type_meta.version!r}"
                )

            for gvk in gvks:
                if gvk in seen:
                    raise DuplicateGVKError(
                        f"duplicate custom resource GVK {gvk} in {path}"
                    )
                seen.add(gvk)

    return v1_crds, v1beta1_crds


def _convert_printer_column(column: Mapping[str, Any]) -> dict[str, Any]:
    converted = {key: value for key, value in column.items() if key != "JSONPath"}
    if "JSONPath" in column:
        converted["jsonPath"] = column["JSONPath"]
    return converted


def _convert_conversion(conversion: Mapping[str, Any]) -> dict[str, Any]:
    converted: dict[str, Any] = {"strategy": conversion.get("strategy", "None")}
    client_config = conversion.get("webhookClientConfig")
    review_versions = conversion.get("conversionReviewVersions")
    if client_config is not None or review_versions is not None:
        webhook: dict[str, Any] = {}
        if client_config is not None:
            webhook["clientConfig"] = client_config
        if review_versions is not None:
            webhook["conversionReviewVersions"] = review_versions
        converted["webhook"] = webhook
    return converted


def convert_v1beta1_to_v1(crd: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a v1beta1 CRD manifest into an equivalent v1 manifest."""
    source = copy.deepcopy(dict(crd))
    spec = source.get("spec") or {}

    out_spec: dict[str, Any] = {
        key: spec[key] for key in ("group", "names", "scope") if key in spec
    }

    versions = spec.get("versions") or []
    if not versions and spec.get("version"):
        versions = [{"name": spec["version"], "served": True, "storage": True}]

    top_schema = spec.get("validation")
    top_subresources = spec.get("subresources")
    top_columns = spec.get("additionalPrinterColumns")

    out_versions = []
    for version in versions:
        out_version: dict[str, Any] = {
            "name": version.get("name", ""),
            "served": bool(version.get("served", False)),
            "storage": bool(version.get("storage", False)),
        }
        for key in ("deprecated", "deprecationWarning"):
            if key in version:
                out_version[key] = version[key]
        schema = version.get("schema") or top_schema
        if schema:
            out_version["schema"] = copy.deepcopy(schema)
        subresources = version.get("subresources") or top_subresources
        if subresources:
            out_version["subresources"] = copy.deepcopy(subresources)
        columns = version.get("additionalPrinterColumns") or top_columns
        if columns:
            out_version["additionalPrinterColumns"] = [
                _convert_printer_column(column) for column in columns
            ]
        out_versions.append(out_version)
    out_spec["versions"] = out_versions

    if spec.get("conversion"):
        out_spec["conversion"] = _convert_conversion(spec["conversion"])
    if "preserveUnknownFields" in spec:
        out_spec["preserveUnknownFields"] = spec["preserveUnknownFields"]

    result: dict[str, Any] = {
        "apiVersion": V1_API_VERSION,
        "kind": CRD_KIND,
        "metadata": source.get("metadata") or {},
        "spec": out_spec,
    }
    if "status" in source:
        result["status"] = source["status"]
    return result