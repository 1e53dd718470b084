"""Helpers for operator projects: manifests, CRDs, naming rules, prompts, project files and bundle metadata."""

__version__ = "0.1.0"