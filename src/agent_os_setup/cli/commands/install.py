"""The base installation command."""

from __future__ import annotations

import logging
from contextlib import closing
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel

from agent_os_setup.cli.ui import StepTracker, build_summary_table, print_failures, show_banner
from agent_os_setup.config_flags import FlagPatcher, read_integration_flags
from agent_os_setup.core.config import DEFAULT_TIMEOUT, DOCS_URL, INTEGRATION_CHOICES
from agent_os_setup.core.options import InstallOptions
from agent_os_setup.provision import (
    ErrorKind,
    Fetcher,
    FetchResult,
    FetchStatus,
    HttpFetcher,
    ProvisionAborted,
    Provisioner,
    build_manifest,
)
from agent_os_setup.provision.filesystem import ensure_directory

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[InstallOptions], Fetcher]

_PHASE_LABELS = {
    "instructions": "Instructions and command templates",
    "standards": "Development standards",
    "config": "Configuration (config.yml)",
    "project_script": "Setup scripts",
    "agent_template": "Claude Code agent templates",
    "prompt_template": "GitHub Copilot prompt templates",
}


def default_fetcher_factory(options: InstallOptions) -> Fetcher:
    return HttpFetcher(timeout=options.timeout, github_token=options.github_token, debug=options.debug)


def configure_logging(console: Console, debug: bool) -> None:
    """Route log records through Rich; DEBUG with --debug, otherwise WARNING."""
    root = logging.getLogger("agent_os_setup")
    root.handlers.clear()
    root.addHandler(RichHandler(console=console, show_path=debug, markup=False))
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    root.propagate = False


class _PhaseProgress:
    """Feeds provisioning results into the step tracker, one step per category."""

    def __init__(self, tracker: StepTracker):
        self.tracker = tracker
        self.counts: dict[str, dict[FetchStatus, int]] = {}

    def __call__(self, result: FetchResult) -> None:
        key = result.artifact.category.value
        self.tracker.add(key, _PHASE_LABELS.get(key, key))
        row = self.counts.setdefault(key, {s: 0 for s in FetchStatus})
        row[result.status] += 1
        detail = ", ".join(f"{n} {status.value}" for status, n in row.items() if n)
        if row[FetchStatus.FAILED]:
            self.tracker.error(key, detail)
        else:
            self.tracker.start(key, detail)

    def finish(self) -> None:
        for key, row in self.counts.items():
            if not row[FetchStatus.FAILED]:
                self.tracker.complete(key)


def _print_next_steps(console: Console, options: InstallOptions, results: list[FetchResult]) -> None:
    install_dir = options.install_dir
    installed_lines = [
        f"{install_dir}/instructions/      - Agent OS instructions",
        f"{install_dir}/standards/         - Development standards",
        f"{install_dir}/commands/          - Command templates",
        f"{install_dir}/config.yml         - Configuration",
        f"{install_dir}/setup/project.sh   - Project installation script",
    ]
    if options.claude_code:
        installed_lines.append(f"{install_dir}/claude-code/agents/ - Claude Code agent templates")
    if options.github_copilot:
        installed_lines.append(f"{install_dir}/github-copilot-prompts/ - GitHub Copilot prompt templates")

    console.print()
    console.print(build_summary_table(results, install_dir))
    print_failures(console, results, install_dir)
    console.print()
    console.print(Panel("\n".join(installed_lines), title="Base installation files", border_style="cyan"))

    project_script = options.project_script_path
    steps = [
        f"1. Customize your standards in [cyan]{install_dir}/standards/[/cyan]",
        f"2. Configure project types in [cyan]{options.config_path}[/cyan]",
        f"3. Navigate to a project directory and run: [cyan]{project_script}[/cyan]",
        "",
        f"Refer to the official Agent OS docs at: {DOCS_URL}",
    ]
    console.print(Panel("\n".join(steps), title="Next steps", border_style="green", padding=(1, 2)))


def _patch_integrations(options: InstallOptions, tracker: StepTracker) -> None:
    flags = options.integration_flags()
    if not flags:
        return

    config_path = options.config_path
    for name in flags:
        tracker.add(f"enable-{name}", f"Enable {INTEGRATION_CHOICES[name]}")

    if not config_path.exists():
        for name in flags:
            tracker.skip(f"enable-{name}", "config.yml missing")
        return

    outcomes = FlagPatcher().apply(config_path, flags)
    for name, error in outcomes.items():
        key = f"enable-{name}"
        if error is None:
            tracker.complete(key, "enabled in configuration")
        elif error.kind is ErrorKind.SECTION_NOT_FOUND:
            tracker.error(key, f"no '{name}' section")
        else:
            tracker.error(key, str(error))


def register_install_command(
    app: typer.Typer,
    *,
    console: Console,
    fetcher_factory: FetcherFactory = default_fetcher_factory,
) -> None:
    """Register the install command on ``app`` with injectable collaborators."""

    @app.command(context_settings={"help_option_names": ["-h", "--help"]})
    def install(
        overwrite_instructions: bool = typer.Option(
            False, "--overwrite-instructions", help="Overwrite existing instruction files"
        ),
        overwrite_standards: bool = typer.Option(
            False, "--overwrite-standards", help="Overwrite existing standards files"
        ),
        overwrite_config: bool = typer.Option(
            False, "--overwrite-config", help="Overwrite existing config.yml"
        ),
        claude_code: bool = typer.Option(
            False, "--claude-code", "--claude", "--claude_code", help="Add Claude Code support"
        ),
        cursor: bool = typer.Option(False, "--cursor", "--cursor-cli", help="Add Cursor support"),
        github_copilot: bool = typer.Option(
            False, "--github-copilot", help="Add GitHub Copilot support"
        ),
        install_dir: Optional[Path] = typer.Option(
            None,
            "--install-dir",
            help="Installation directory (defaults to ./.agent-os)",
            file_okay=False,
        ),
        base_url: Optional[str] = typer.Option(
            None,
            "--base-url",
            envvar="AGENT_OS_BASE_URL",
            help="Raw content URL to download Agent OS files from",
        ),
        timeout: float = typer.Option(
            DEFAULT_TIMEOUT, "--timeout", min=1.0, help="Per-request timeout in seconds"
        ),
        debug: bool = typer.Option(False, "--debug", help="Show verbose diagnostic output"),
    ) -> None:
        """Install the Agent OS base installation into the current directory."""
        configure_logging(console, debug)
        options = InstallOptions.from_cli(
            install_dir=install_dir,
            base_url=base_url,
            overwrite_instructions=overwrite_instructions,
            overwrite_standards=overwrite_standards,
            overwrite_config=overwrite_config,
            claude_code=claude_code,
            cursor=cursor,
            github_copilot=github_copilot,
            timeout=timeout,
            debug=debug,
        )
        logger.debug("Install options: %s", options)

        show_banner(console)
        console.print(
            f"[cyan]The Agent OS base installation will be installed in[/cyan] {options.install_dir.parent}"
        )
        console.print()

        tracker = StepTracker("Install Agent OS")
        tracker.add("dirs", "Create base directories")
        try:
            ensure_directory(options.install_dir / "setup")
        except OSError as e:
            tracker.error("dirs", str(e))
            console.print(tracker.render())
            console.print(Panel(str(e), title="Cannot create install directory", border_style="red"))
            raise typer.Exit(1)
        tracker.complete("dirs", str(options.install_dir))

        progress = _PhaseProgress(tracker)
        manifest = build_manifest(options)
        try:
            with closing(fetcher_factory(options)) as fetcher, Live(
                tracker.render(), console=console, refresh_per_second=8, transient=True
            ) as live:
                tracker.attach_refresh(lambda: live.update(tracker.render()))
                provisioner = Provisioner(fetcher, install_root=options.install_dir)
                results = provisioner.provision_all(manifest, options.policy(), on_result=progress)
                progress.finish()
                _patch_integrations(options, tracker)
        except ProvisionAborted as e:
            progress.finish()
            console.print(tracker.render())
            console.print()
            console.print(Panel(str(e), title="Installation aborted", border_style="red"))
            console.print(build_summary_table(e.results, options.install_dir))
            print_failures(console, e.results, options.install_dir)
            raise typer.Exit(1)
        finally:
            tracker.attach_refresh(None)

        console.print(tracker.render())

        states = read_integration_flags(options.config_path)
        missing = [n for n in options.integration_flags() if not states.get(n)]
        if missing:
            console.print(
                "[yellow]Warning:[/yellow] could not enable "
                + ", ".join(INTEGRATION_CHOICES[n] for n in missing)
                + " in config.yml; the config schema may be out of sync with this installer."
            )

        _print_next_steps(console, options, results)
        console.print()
        console.print("[bold green]Agent OS base installation has been completed.[/bold green]")


__all__ = ["default_fetcher_factory", "register_install_command"]
