"""
Integration flag management for the Agent OS ``config.yml``.

The config file is hand-maintained YAML, so flags are patched line by line
instead of round-tripping through a YAML dumper. Only the value token of a
single ``enabled:`` line changes; comments, ordering, spacing and line
endings stay exactly as they were.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Mapping

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from agent_os_setup.core.config import INTEGRATION_CHOICES
from agent_os_setup.provision.models import ErrorKind, ProvisionError

logger = logging.getLogger(__name__)

_KEY_ONLY_RE = re.compile(r"^(?P<indent>[ \t]*)(?P<key>[^\s:#][^:#]*?):[ \t]*(#.*)?$")
_ENABLED_RE = re.compile(
    r"^(?P<prefix>[ \t]*enabled:[ \t]*)(?P<value>true|false|True|False|TRUE|FALSE|yes|no)(?P<suffix>[ \t]*(#.*)?)$"
)


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _is_content(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


class FlagPatcher:
    """Rewrites ``enabled:`` values inside named config sections."""

    def find_section(self, lines: list[str], flag_name: str) -> tuple[int, int] | None:
        """
        Locate the span of the first section named ``flag_name``.

        A section header is a line holding only ``<flag_name>:`` (optionally
        followed by a comment). The section ends at the next content line
        indented no deeper than the header.

        Returns:
            ``(header_index, end_index)`` with ``end_index`` exclusive, or None
        """
        for index, raw in enumerate(lines):
            line = raw.rstrip("\r\n")
            match = _KEY_ONLY_RE.match(line)
            if not match or match.group("key").strip() != flag_name:
                continue
            header_indent = _indent_width(line)
            end = len(lines)
            for offset, following in enumerate(lines[index + 1:], start=index + 1):
                body = following.rstrip("\r\n")
                if _is_content(body) and _indent_width(body) <= header_indent:
                    end = offset
                    break
            return index, end
        return None

    def set_flag(self, path: Path, flag_name: str, value: bool) -> bool:
        """
        Set ``enabled:`` inside section ``flag_name`` to ``value``.

        Args:
            path: Config file to patch in place
            flag_name: Section name (e.g. ``claude_code``)
            value: Desired truth value

        Returns:
            True if the file was rewritten, False if it already matched

        Raises:
            ProvisionError: ``not_found`` when the file is missing,
                ``section_not_found`` when the section or its
                ``enabled:`` line is missing,
                ``io_error`` when the file cannot be read or replaced
        """
        if not path.is_file():
            raise ProvisionError(ErrorKind.NOT_FOUND, "Config file not found", str(path))

        # newline="" keeps \r\n endings intact so untouched lines stay byte-identical
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                lines = f.read().splitlines(keepends=True)
        except (OSError, UnicodeDecodeError) as e:
            raise ProvisionError(ErrorKind.IO_ERROR, f"Cannot read config: {e}", str(path)) from e

        span = self.find_section(lines, flag_name)
        if span is None:
            raise ProvisionError(
                ErrorKind.SECTION_NOT_FOUND, f"Section '{flag_name}' not found", str(path)
            )

        start, end = span
        literal = "true" if value else "false"
        for index in range(start + 1, end):
            raw = lines[index]
            body = raw.rstrip("\r\n")
            match = _ENABLED_RE.match(body)
            if not match:
                continue
            if match.group("value") == literal:
                logger.debug("%s already enabled=%s in %s", flag_name, literal, path)
                return False
            ending = raw[len(body):]
            lines[index] = f"{match.group('prefix')}{literal}{match.group('suffix')}{ending}"
            try:
                self._write_lines(path, lines)
            except OSError as e:
                raise ProvisionError(ErrorKind.IO_ERROR, f"Cannot write config: {e}", str(path)) from e
            logger.info("Set %s.enabled=%s in %s", flag_name, literal, path)
            return True

        raise ProvisionError(
            ErrorKind.SECTION_NOT_FOUND,
            f"Section '{flag_name}' has no 'enabled:' entry",
            str(path),
        )

    def apply(self, path: Path, flags: Mapping[str, bool]) -> dict[str, ProvisionError | None]:
        """Apply every flag; returns each flag's error (None on success)."""
        outcomes: dict[str, ProvisionError | None] = {}
        for name, value in flags.items():
            try:
                self.set_flag(path, name, value)
                outcomes[name] = None
            except ProvisionError as e:
                logger.warning("Could not set %s: %s", name, e)
                outcomes[name] = e
        return outcomes

    def _write_lines(self, path: Path, lines: list[str]) -> None:
        """Write to a temp file beside ``path`` and rename over it."""
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write("".join(lines))
            shutil.copymode(path, tmp_path)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


def read_integration_flags(path: Path) -> dict[str, bool]:
    """Report the ``enabled`` state of each known integration in ``path``.

    Sections are looked up at the top level first, then under ``agents:``.
    Unreadable or malformed config yields an empty mapping.
    """
    if not path.is_file():
        return {}

    yaml = YAML(typ="safe")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except (OSError, YAMLError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        return {}

    agents = data.get("agents")
    containers = [data, agents if isinstance(agents, dict) else {}]

    states: dict[str, bool] = {}
    for name in INTEGRATION_CHOICES:
        for container in containers:
            section = container.get(name)
            if isinstance(section, dict) and "enabled" in section:
                states[name] = bool(section["enabled"])
                break
    return states


__all__ = ["FlagPatcher", "read_integration_flags"]
