"""CLI helpers exposed for other modules."""

from .ui import StepTracker, build_summary_table, print_failures, show_banner

__all__ = ["StepTracker", "build_summary_table", "print_failures", "show_banner"]
