"""Expand the static catalog into the ordered manifest for one run."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from agent_os_setup.core.config import (
    AGENT_TEMPLATES,
    INSTRUCTION_FILES,
    PROMPT_COMMANDS,
    STANDARDS_FILES,
)
from agent_os_setup.provision.models import Artifact, Category

if TYPE_CHECKING:
    from agent_os_setup.core.options import InstallOptions


def _artifact(
    base_url: str,
    install_dir: Path,
    remote: str,
    category: Category,
    *,
    local: str | None = None,
    executable: bool = False,
    critical: bool = False,
) -> Artifact:
    local = local or remote
    return Artifact(
        remote_url=f"{base_url}/{remote}",
        local_path=install_dir.joinpath(*local.split("/")),
        category=category,
        executable=executable,
        critical=critical,
        label=local,
    )


def bootstrap_artifacts(base_url: str, install_dir: Path) -> list[Artifact]:
    """Setup functions fetched before anything else."""
    return [
        _artifact(base_url, install_dir, "setup/functions.sh", Category.PROJECT_SCRIPT, critical=True),
    ]


def base_artifacts(base_url: str, install_dir: Path) -> list[Artifact]:
    """Instructions, standards, command templates, config and project script."""
    artifacts = [
        _artifact(base_url, install_dir, f"instructions/{name}", Category.INSTRUCTIONS, critical=True)
        for name in INSTRUCTION_FILES
    ]
    artifacts += [
        _artifact(base_url, install_dir, f"standards/{name}", Category.STANDARDS, critical=True)
        for name in STANDARDS_FILES
    ]
    # Command templates follow the instructions overwrite flag
    artifacts += [
        _artifact(base_url, install_dir, f"commands/{cmd}.md", Category.INSTRUCTIONS, critical=True)
        for cmd in PROMPT_COMMANDS
    ]
    artifacts.append(_artifact(base_url, install_dir, "config.yml", Category.CONFIG, critical=True))
    artifacts.append(
        _artifact(
            base_url,
            install_dir,
            "setup/project.sh",
            Category.PROJECT_SCRIPT,
            executable=True,
            critical=True,
        )
    )
    return artifacts


def claude_code_artifacts(base_url: str, install_dir: Path) -> list[Artifact]:
    return [
        _artifact(base_url, install_dir, f"claude-code/agents/{agent}.md", Category.AGENT_TEMPLATE)
        for agent in AGENT_TEMPLATES
    ]


def github_copilot_artifacts(base_url: str, install_dir: Path) -> list[Artifact]:
    """Prompt templates, renamed to ``<command>.prompt.md`` locally."""
    return [
        _artifact(
            base_url,
            install_dir,
            f".github/prompts/{cmd}.md",
            Category.PROMPT_TEMPLATE,
            local=f"github-copilot-prompts/{cmd}.prompt.md",
        )
        for cmd in PROMPT_COMMANDS
    ]


def build_manifest(options: InstallOptions) -> list[Artifact]:
    """Return every artifact for this run, in installation order."""
    base_url, install_dir = options.base_url, options.install_dir
    manifest = bootstrap_artifacts(base_url, install_dir)
    manifest += base_artifacts(base_url, install_dir)
    if options.claude_code:
        manifest += claude_code_artifacts(base_url, install_dir)
    if options.github_copilot:
        manifest += github_copilot_artifacts(base_url, install_dir)
    return manifest


__all__ = [
    "base_artifacts",
    "bootstrap_artifacts",
    "build_manifest",
    "claude_code_artifacts",
    "github_copilot_artifacts",
]
