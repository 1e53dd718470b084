"""Bundle metadata generation and bundle image building."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from opsdkutil.project import DIR_MODE

log = logging.getLogger(__name__)

_METADATA_DIR = "metadata"
_MANIFEST_DIR = "manifests"
_BUNDLE_DOCKERFILE = "bundle.Dockerfile"
_PREFIX = "operators.operatorframework.io"


def _to_yaml(label: str) -> str:
    """Turn a Dockerfile label into a YAML key/value pair."""
    return label.replace("=", ": ")


def _core_entries(values: Mapping[str, Any]) -> list[tuple[str, str]]:
    entries = [
        (f"{_PREFIX}.bundle.mediatype.v1", "registry+v1"),
        (f"{_PREFIX}.bundle.manifests.v1", "manifests/"),
        (f"{_PREFIX}.bundle.metadata.v1", "metadata/"),
        (f"{_PREFIX}.bundle.package.v1", str(values.get("package_name", ""))),
        (f"{_PREFIX}.bundle.channels.v1", str(values.get("channels", ""))),
    ]
    if values.get("default_channel"):
        entries.append(
            (f"{_PREFIX}.bundle.channel.default.v1", str(values["default_channel"]))
        )
    return entries


_TEST_ENTRIES = (
    (f"{_PREFIX}.test.mediatype.v1", "scorecard+v1"),
    (f"{_PREFIX}.test.config.v1", "tests/scorecard/"),
)


def render_dockerfile(values: Mapping[str, Any]) -> str:
    """Render bundle.Dockerfile from annotation values."""
    bundle_dir = values.get("bundle_dir", "")
    scorecard = bool(values.get("is_scorecard_config_present"))
    lines = ["FROM scratch", "", "# Core bundle labels."]
    lines.extend(f"LABEL {key}={value}" for key, value in _core_entries(values))
    lines.extend(f"LABEL {label}" for label in values.get("other_labels") or [])
    if scorecard:
        lines.extend(["", "# Labels for testing."])
        lines.extend(f"LABEL {key}={value}" for key, value in _TEST_ENTRIES)
    lines.extend(
        [
            "",
            "# Copy files to locations specified by labels.",
            f"COPY {bundle_dir}/manifests /manifests/",
            f"COPY {bundle_dir}/metadata /metadata/",
        ]
    )
    if scorecard:
        lines.append(f"COPY {bundle_dir}/tests/scorecard /tests/scorecard/")
    return "\n".join(lines) + "\n"


def render_annotations(values: Mapping[str, Any]) -> str:
    """Render metadata/annotations.yaml from annotation values."""
    lines = ["annotations:", "  # Core bundle annotations."]
    lines.extend(f"  {key}: {value}" for key, value in _core_entries(values))
    lines.extend(f"  {_to_yaml(label)}" for label in values.get("other_labels") or [])
    if values.get("is_scorecard_config_present"):
        lines.extend(["", "  # Annotations for testing."])
        lines.extend(f"  {key}: {value}" for key, value in _TEST_ENTRIES)
    return "\n".join(lines) + "\n"


def copy_manifests(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Copy the directory tree src into dest."""
    try:
        src_mode = os.stat(src).st_mode
    except OSError as exc:
        raise OSError(f"error reading source directory {exc}") from exc
    os.makedirs(dest, mode=src_mode & 0o7777, exist_ok=True)
    for entry in Path(src).iterdir():
        target = Path(dest) / entry.name
        if entry.is_dir():
            copy_manifests(entry, target)
        else:
            shutil.copyfile(entry, target)


@dataclass
class BundleMetaData:
    """Metadata needed to build bundles and bundle images."""

    bundle_dir: str
    package_name: str = ""
    channels: str = ""
    default_channel: str = ""
    base_image: str = ""
    build_command: str = ""
    pkgmanifest_path: str = ""
    is_score_config_present: bool = False
    other_labels: dict[str, str] = field(default_factory=dict)
    verbose: bool = False

    def __post_init__(self) -> None:
        self.bundle_dir = os.fspath(self.bundle_dir)
        self.pkgmanifest_path = os.fspath(self.pkgmanifest_path)

    def _parent_dir(self) -> str:
        return os.path.dirname(os.path.normpath(self.bundle_dir))

    def generate_metadata(self) -> None:
        """Write bundle.Dockerfile and metadata/annotations.yaml."""
        os.makedirs(self.bundle_dir, mode=DIR_MODE, exist_ok=True)
        values: dict[str, Any] = {
            "bundle_dir": self.bundle_dir,
            "package_name": self.package_name,
            "channels": self.channels,
            "default_channel": self.default_channel,
            "is_scorecard_config_present": self.is_score_config_present,
            "other_labels": sorted(f"{k}={v}" for k, v in self.other_labels.items()),
        }

        metadata_dir = os.path.join(self.bundle_dir, _METADATA_DIR)
        os.makedirs(metadata_dir, mode=DIR_MODE, exist_ok=True)

        dockerfile_path = _BUNDLE_DOCKERFILE
        # When migrating from package manifests, the Dockerfile sits beside
        # the bundle directory and refers to it by its base name.
        if self.pkgmanifest_path:
            dockerfile_path = os.path.join(self._parent_dir(), _BUNDLE_DOCKERFILE)
            values["bundle_dir"] = os.path.basename(os.path.normpath(self.bundle_dir))

        outputs = {
            dockerfile_path: render_dockerfile(values),
            os.path.join(metadata_dir, "annotations.yaml"): render_annotations(values),
        }
        for path, content in outputs.items():
            log.info("Creating %s", path)
            Path(path).write_bytes(content.encode("utf-8"))
        log.info("Bundle metadata generated successfully")

    def copy_operator_manifests(self) -> None:
        """Copy the package manifests directory into bundle_dir/manifests."""
        copy_manifests(
            self.pkgmanifest_path, os.path.join(self.bundle_dir, _MANIFEST_DIR)
        )

    def build_bundle_image(self, tag: str) -> None:
        """Build the bundle image with build_command, or docker build by default."""
        image = f"{self.base_image}:{tag}"
        if self.build_command:
            log.info("Using the specified command to build image")
            command = self.build_command.split(" ") + [image]
        else:
            command = ["docker", "build", "-f", _BUNDLE_DOCKERFILE, "-t", image, "."]
        result = subprocess.run(
            command,
            cwd=self._parent_dir() or ".",
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            check=False,
        )
        output = result.stdout.decode(errors="replace")
        if result.returncode != 0 or self.verbose:
            print(output)
        if result.returncode != 0:
            raise subprocess.CalledProcessError(
                result.returncode, command, output=result.stdout
            )
        log.info("Successfully built image %s", image)

    def write_scorecard_config(self, input_config_path: str | os.PathLike[str]) -> None:
        """Copy the scorecard config into bundle_dir/tests/scorecard/config.yaml."""
        filename = os.path.basename(os.fspath(input_config_path))
        duplicate = Path(self.bundle_dir, _MANIFEST_DIR, filename)
        if duplicate.is_dir() and not duplicate.is_symlink():
            shutil.rmtree(duplicate)
        elif duplicate.exists() or duplicate.is_symlink():
            duplicate.unlink()

        scorecard_dir = os.path.join(self.bundle_dir, "tests", "scorecard")
        os.makedirs(scorecard_dir, mode=DIR_MODE, exist_ok=True)
        log.info("Writing scorecard config in %s", scorecard_dir)
        data = Path(input_config_path).read_bytes()
        try:
            Path(scorecard_dir, "config.yaml").write_bytes(data)
        except OSError as exc:
            raise OSError(f"error writing scorecard config {exc}") from exc