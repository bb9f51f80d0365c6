"""Static catalog and defaults for the Agent OS base installation."""

from __future__ import annotations

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/buildermethods/agent-os/main"
BASE_URL_ENV_VAR = "AGENT_OS_BASE_URL"
INSTALL_DIR_NAME = ".agent-os"
DEFAULT_TIMEOUT = 30.0

AGENT_TEMPLATES: tuple[str, ...] = (
    "context-fetcher",
    "date-checker",
    "file-creator",
    "git-workflow",
    "project-manager",
    "test-runner",
)

PROMPT_COMMANDS: tuple[str, ...] = (
    "analyze-product",
    "create-spec",
    "create-tasks",
    "execute-tasks",
    "plan-product",
)

INSTRUCTION_FILES: tuple[str, ...] = (
    "core/analyze-product.md",
    "core/create-spec.md",
    "core/create-tasks.md",
    "core/execute-task.md",
    "core/execute-tasks.md",
    "core/plan-product.md",
    "core/post-execution-tasks.md",
    "meta/pre-flight.md",
    "meta/post-flight.md",
)

STANDARDS_FILES: tuple[str, ...] = (
    "best-practices.md",
    "code-style.md",
    "tech-stack.md",
    "code-style/css-style.md",
    "code-style/html-style.md",
    "code-style/javascript-style.md",
)

# Config section name -> human readable integration name
INTEGRATION_CHOICES: dict[str, str] = {
    "claude_code": "Claude Code",
    "cursor": "Cursor",
    "github_copilot": "GitHub Copilot",
}

DOCS_URL = "https://buildermethods.com/agent-os"

BANNER = """
 █████╗  ██████╗ ███████╗███╗   ██╗████████╗     ██████╗ ███████╗
██╔══██╗██╔════╝ ██╔════╝████╗  ██║╚══██╔══╝    ██╔═══██╗██╔════╝
███████║██║  ███╗█████╗  ██╔██╗ ██║   ██║       ██║   ██║███████╗
██╔══██║██║   ██║██╔══╝  ██║╚██╗██║   ██║       ██║   ██║╚════██║
██║  ██║╚██████╔╝███████╗██║ ╚████║   ██║       ╚██████╔╝███████║
╚═╝  ╚═╝ ╚═════╝ ╚══════╝╚═╝  ╚═══╝   ╚═╝        ╚═════╝ ╚══════╝
"""

TAGLINE = "Agent OS - Base Installation"

__all__ = [
    "AGENT_TEMPLATES",
    "BANNER",
    "BASE_URL_ENV_VAR",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "DOCS_URL",
    "INSTALL_DIR_NAME",
    "INSTRUCTION_FILES",
    "INTEGRATION_CHOICES",
    "PROMPT_COMMANDS",
    "STANDARDS_FILES",
    "TAGLINE",
]
