"""CLI command modules for the Agent OS installer."""

from .install import default_fetcher_factory, register_install_command

__all__ = ["default_fetcher_factory", "register_install_command"]
