[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opsdkutil"
version = "0.1.0"
description = "Helpers for operator projects: manifest scanning, CRD discovery, naming rules, prompts, project files and bundle metadata"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["kubernetes", "operator", "crd", "olm", "bundle", "manifests", "yaml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["opsdkutil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
