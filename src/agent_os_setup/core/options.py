"""Immutable run configuration built once from CLI flags and environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from agent_os_setup.core.config import (
    BASE_URL_ENV_VAR,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    INSTALL_DIR_NAME,
)
from agent_os_setup.provision.models import Category, OverwritePolicy


def _github_token() -> str | None:
    """Return sanitized GitHub token from the environment or None."""
    return ((os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()) or None


@dataclass(frozen=True)
class InstallOptions:
    """Everything one installation run needs to know.

    Attributes:
        install_dir: Root of the base installation (``./.agent-os`` by default)
        base_url: Raw-content URL the catalog paths are resolved against
        overwrite_instructions: Replace existing instruction and command files
        overwrite_standards: Replace existing standards files
        overwrite_config: Replace an existing config.yml
        claude_code: Install agent templates and enable ``claude_code``
        cursor: Enable ``cursor``
        github_copilot: Install prompt templates and enable ``github_copilot``
        timeout: Per-request transport timeout in seconds
        github_token: Optional token sent as a Bearer header
        debug: Include response details in fetch error messages
    """

    install_dir: Path
    base_url: str = DEFAULT_BASE_URL
    overwrite_instructions: bool = False
    overwrite_standards: bool = False
    overwrite_config: bool = False
    claude_code: bool = False
    cursor: bool = False
    github_copilot: bool = False
    timeout: float = DEFAULT_TIMEOUT
    github_token: str | None = field(default=None, repr=False)
    debug: bool = False

    @classmethod
    def from_cli(
        cls,
        *,
        install_dir: Path | None = None,
        base_url: str | None = None,
        overwrite_instructions: bool = False,
        overwrite_standards: bool = False,
        overwrite_config: bool = False,
        claude_code: bool = False,
        cursor: bool = False,
        github_copilot: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> InstallOptions:
        """Resolve defaults and environment overrides into an options record."""
        root = install_dir if install_dir is not None else Path.cwd() / INSTALL_DIR_NAME
        url = base_url or os.getenv(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL
        return cls(
            install_dir=root.expanduser().resolve(),
            base_url=url.rstrip("/"),
            overwrite_instructions=overwrite_instructions,
            overwrite_standards=overwrite_standards,
            overwrite_config=overwrite_config,
            claude_code=claude_code,
            cursor=cursor,
            github_copilot=github_copilot,
            timeout=timeout,
            github_token=_github_token(),
            debug=debug,
        )

    def policy(self) -> OverwritePolicy:
        """Overwrite policy for this run; setup scripts are always refreshed."""
        return OverwritePolicy(
            {
                Category.INSTRUCTIONS: self.overwrite_instructions,
                Category.STANDARDS: self.overwrite_standards,
                Category.CONFIG: self.overwrite_config,
                Category.AGENT_TEMPLATE: False,
                Category.PROMPT_TEMPLATE: False,
            }
        ).forced(Category.PROJECT_SCRIPT)

    def integration_flags(self) -> dict[str, bool]:
        """Config sections to enable, in the order they are patched."""
        flags: dict[str, bool] = {}
        if self.claude_code:
            flags["claude_code"] = True
        if self.github_copilot:
            flags["github_copilot"] = True
        if self.cursor:
            flags["cursor"] = True
        return flags

    @property
    def config_path(self) -> Path:
        return self.install_dir / "config.yml"

    @property
    def project_script_path(self) -> Path:
        return self.install_dir / "setup" / "project.sh"


__all__ = ["InstallOptions"]
