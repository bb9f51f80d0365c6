"""Core configuration exports."""

from .config import (
    AGENT_TEMPLATES,
    BANNER,
    BASE_URL_ENV_VAR,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DOCS_URL,
    INSTALL_DIR_NAME,
    INSTRUCTION_FILES,
    INTEGRATION_CHOICES,
    PROMPT_COMMANDS,
    STANDARDS_FILES,
    TAGLINE,
)
from .options import InstallOptions

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
    "InstallOptions",
    "PROMPT_COMMANDS",
    "STANDARDS_FILES",
    "TAGLINE",
]
