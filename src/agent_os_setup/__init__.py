#!/usr/bin/env python3
"""
Agent OS setup - installs the Agent OS base installation.

Usage:
    agent-os-setup
    agent-os-setup --claude-code --cursor
    agent-os-setup --overwrite-instructions --overwrite-standards
"""

import typer
from rich.console import Console

from agent_os_setup.cli.commands import register_install_command

console = Console()

app = typer.Typer(
    name="agent-os-setup",
    help="Install the Agent OS base installation into the current directory",
    add_completion=False,
)

register_install_command(app, console=console)


def main():
    app()


if __name__ == "__main__":
    main()
