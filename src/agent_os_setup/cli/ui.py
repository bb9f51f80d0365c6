"""Reusable UI helpers for the Agent OS installer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from rich.align import Align
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from agent_os_setup.core.config import BANNER, TAGLINE
from agent_os_setup.provision.models import FetchResult, FetchStatus


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    ERROR = "error"
    SKIPPED = "skipped"


_SYMBOLS = {
    StepStatus.PENDING: "[green dim]○[/green dim]",
    StepStatus.RUNNING: "[cyan]○[/cyan]",
    StepStatus.DONE: "[green]●[/green]",
    StepStatus.ERROR: "[red]●[/red]",
    StepStatus.SKIPPED: "[yellow]○[/yellow]",
}


@dataclass
class Step:
    key: str
    label: str
    status: StepStatus = StepStatus.PENDING
    detail: str = ""

    def render_line(self) -> str:
        symbol = _SYMBOLS[self.status]
        detail = self.detail.strip()
        if self.status is StepStatus.PENDING:
            text = f"{self.label} ({detail})" if detail else self.label
            return f"{symbol} [bright_black]{text}[/bright_black]"
        line = f"{symbol} [white]{self.label}[/white]"
        if detail:
            line += f" [bright_black]({detail})[/bright_black]"
        return line


class StepTracker:
    """Ordered installation steps rendered as a Rich tree.

    Steps are keyed; updating an unknown key appends it. A refresh callback
    (usually ``Live.update``) runs after every change.
    """

    def __init__(self, title: str):
        self.title = title
        self.steps: dict[str, Step] = {}
        self._refresh_cb: Callable[[], None] | None = None

    def attach_refresh(self, cb: Callable[[], None] | None) -> None:
        self._refresh_cb = cb

    def add(self, key: str, label: str) -> None:
        if key not in self.steps:
            self.steps[key] = Step(key, label)
            self._maybe_refresh()

    def start(self, key: str, detail: str = "") -> None:
        self._update(key, StepStatus.RUNNING, detail)

    def complete(self, key: str, detail: str = "") -> None:
        self._update(key, StepStatus.DONE, detail)

    def error(self, key: str, detail: str = "") -> None:
        self._update(key, StepStatus.ERROR, detail)

    def skip(self, key: str, detail: str = "") -> None:
        self._update(key, StepStatus.SKIPPED, detail)

    def status(self, key: str) -> StepStatus | None:
        step = self.steps.get(key)
        return step.status if step else None

    def _update(self, key: str, status: StepStatus, detail: str) -> None:
        step = self.steps.setdefault(key, Step(key, key))
        step.status = status
        if detail:
            step.detail = detail
        self._maybe_refresh()

    def _maybe_refresh(self) -> None:
        if self._refresh_cb:
            self._refresh_cb()

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps.values():
            tree.add(step.render_line())
        return tree


def show_banner(console: Console) -> None:
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip().split("\n")
    colors = ["bright_blue", "blue", "cyan", "bright_cyan", "white", "bright_white"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        color = colors[i % len(colors)]
        styled_banner.append(line + "\n", style=color)

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def build_summary_table(results: Iterable[FetchResult], install_dir: Path) -> Table:
    """Per-category counts of written, skipped and failed artifacts."""
    counts: dict[str, dict[FetchStatus, int]] = {}
    for result in results:
        row = counts.setdefault(result.artifact.category.value, {s: 0 for s in FetchStatus})
        row[result.status] += 1

    table = Table(title=f"Installed to {install_dir}", show_lines=False)
    table.add_column("Category", style="cyan")
    table.add_column("Written", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Failed", justify="right", style="red")
    for category, row in counts.items():
        table.add_row(
            category.replace("_", " "),
            str(row[FetchStatus.WRITTEN]),
            str(row[FetchStatus.SKIPPED]),
            str(row[FetchStatus.FAILED]),
        )
    return table


def print_failures(console: Console, results: Iterable[FetchResult], install_dir: Path) -> None:
    """List every artifact that was not installed."""
    failed = [r for r in results if r.status is FetchStatus.FAILED]
    if not failed:
        return
    console.print("[yellow]Not installed:[/yellow]")
    for result in failed:
        path = _relative(result.artifact.local_path, install_dir)
        console.print(f"  - {path} [dim]({result.error})[/dim]")


__all__ = ["Step", "StepStatus", "StepTracker", "build_summary_table", "print_failures", "show_banner"]
