"""Project configuration and file helpers."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping, MutableMapping
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

DIR_MODE = 0o755
FILE_MODE = 0o644
EXEC_FILE_MODE = 0o755

GO_FLAGS_ENV = "GOFLAGS"

CONFIG_FILE = "PROJECT"

_VERBOSE_FLAG_RE = re.compile(r"(.* )?-v(.* )?")


class OperatorType(str, Enum):
    """The kind of operator a project builds."""

    GO = "go"
    ANSIBLE = "ansible"
    HELM = "helm"
    HYBRID_HELM = "hybridHelm"
    UNKNOWN = "unknown"


class UnknownOperatorTypeError(Exception):
    """Raised for an operator type that is not recognised."""

    def __init__(self, operator_type: str = "") -> None:
        self.operator_type = operator_type
        if operator_type:
            message = f'unknown operator type "{operator_type}"'
        else:
            message = "unknown operator type"
        super().__init__(message)


def has_project_file(path: str | os.PathLike[str] = CONFIG_FILE) -> bool:
    """Return True if the project configuration file exists."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def read_config(path: str | os.PathLike[str] = CONFIG_FILE) -> dict[str, Any]:
    """Load the project configuration file."""
    with open(path, encoding="utf-8") as handle:
        try:
            config = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"unable to parse {os.fspath(path)}: {exc}") from exc
    if not isinstance(config, Mapping):
        raise ValueError(f"unable to parse {os.fspath(path)}: not a mapping")
    if not config.get("version"):
        raise ValueError("unable to determine config version")
    return dict(config)


def plugin_chain_to_operator_type(plugin_keys: Iterable[str]) -> OperatorType:
    """Map a plugin chain to the operator type of its first recognised key."""
    prefixes = (
        ("go", OperatorType.GO),
        ("helm", OperatorType.HELM),
        ("ansible", OperatorType.ANSIBLE),
        ("hybrid", OperatorType.HYBRID_HELM),
    )
    for key in plugin_keys:
        for prefix, operator_type in prefixes:
            if key.startswith(prefix):
                return operator_type
    return OperatorType.UNKNOWN


def get_project_layout(config: Mapping[str, Any]) -> str:
    """Return the configuration's plugin chain as a comma separated list."""
    layout = config.get("layout")
    if layout is None:
        return ""
    if isinstance(layout, str):
        return layout
    return ",".join(layout)


def set_go_verbose(environ: MutableMapping[str, str] | None = None) -> None:
    """Add "-v" to GOFLAGS unless it is already there."""
    env = os.environ if environ is None else environ
    flags = env.get(GO_FLAGS_ENV, "")
    if not flags:
        env[GO_FLAGS_ENV] = "-v"
    elif not _VERBOSE_FLAG_RE.search(flags):
        env[GO_FLAGS_ENV] = flags + " -v"


def append_content(file_contents: str, target: str, new_content: str) -> str:
    """Insert new_content on the line after the last occurrence of target."""
    label_index = file_contents.rfind(target)
    if label_index == -1:
        raise ValueError(f"no prior string {target} in newContent")
    separation_index = file_contents.find("\n", label_index)
    if separation_index == -1:
        raise ValueError(
            f"no new line at the end of string {file_contents[label_index:]}"
        )
    index = separation_index + 1
    return file_contents[:index] + new_content + file_contents[index:]


def rewrite_file_contents(
    filename: str | os.PathLike[str], target: str, new_content: str
) -> None:
    """Insert new_content after the last line holding target, in place."""
    path = Path(filename)
    try:
        text = path.read_bytes().decode("utf-8")
    except OSError as exc:
        raise OSError(f"error in getting contents from the file, {exc}") from exc
    modified = append_content(text, target, new_content)
    try:
        path.write_bytes(modified.encode("utf-8"))
    except OSError as exc:
        raise OSError(f"error writing modified contents to file, {exc}") from exc