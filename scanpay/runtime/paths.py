"""Centralized path management for scanpay.

All configuration files are resolved from a single project root so the CLI,
the HTTP server and tests agree on where rules live.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root directory (``SCANPAY_HOME`` or the cwd)."""
    env_root = os.environ.get("SCANPAY_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Source code paths ---
    @property
    def src(self) -> Path:
        """scanpay package directory."""
        return Path(__file__).resolve().parents[1]

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def parser_rules(self) -> Path:
        """Parser policy TOML file (price limits)."""
        return self.config / "parser.toml"

    @property
    def vendor_templates(self) -> Path:
        """Project-level vendor template TOML file."""
        return self.config / "vendor_templates.toml"

    @property
    def default_vendor_templates(self) -> Path:
        """Packaged default vendor template TOML file."""
        return self.src / "receipt" / "rules" / "vendor_templates.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached ProjectPaths so the next call re-reads SCANPAY_HOME."""
    global _paths
    _paths = None
