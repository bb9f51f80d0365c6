"""Data model for the file-provisioning engine.

Provides:
- Category and OverwritePolicy (which artifacts may be replaced)
- Artifact (one remote-to-local file mapping)
- ProvisionError / ProvisionAborted (error kinds and fatal batch failures)
- FetchResult (outcome of provisioning a single artifact)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


class Category(str, Enum):
    """Classification of an artifact controlling which overwrite policy applies."""

    INSTRUCTIONS = "instructions"
    STANDARDS = "standards"
    CONFIG = "config"
    AGENT_TEMPLATE = "agent_template"
    PROMPT_TEMPLATE = "prompt_template"
    PROJECT_SCRIPT = "project_script"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    IO_ERROR = "io_error"
    SECTION_NOT_FOUND = "section_not_found"


class FetchStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


_FATAL_KINDS = frozenset({ErrorKind.PERMISSION_DENIED, ErrorKind.IO_ERROR})


class ProvisionError(Exception):
    """A fetch, write or patch failure tagged with its ErrorKind."""

    def __init__(self, kind: ErrorKind, message: str, target: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.target = target

    def __str__(self) -> str:
        if self.target:
            return f"{self.message} ({self.target})"
        return self.message


@dataclass(frozen=True)
class Artifact:
    """One remote file and the local path it is installed to.

    Attributes:
        remote_url: Absolute URL of the remote file
        local_path: Destination path under the install root
        category: Category used to look up the overwrite policy
        executable: Set the execute bits after writing
        critical: A failure on this artifact aborts the whole run
        label: Short name used in progress output (defaults to the file name)
    """

    remote_url: str
    local_path: Path
    category: Category
    executable: bool = False
    critical: bool = False
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.local_path.name


@dataclass(frozen=True)
class OverwritePolicy:
    """Immutable mapping of Category -> "may overwrite an existing file"."""

    rules: Mapping[Category, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def allows(self, category: Category) -> bool:
        return bool(self.rules.get(category, False))

    def forced(self, *categories: Category) -> OverwritePolicy:
        """Return a new policy that always overwrites the given categories."""
        rules = dict(self.rules)
        for category in categories:
            rules[category] = True
        return OverwritePolicy(rules)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of provisioning one artifact."""

    artifact: Artifact
    status: FetchStatus
    error: ProvisionError | None = None

    @classmethod
    def written(cls, artifact: Artifact) -> FetchResult:
        return cls(artifact, FetchStatus.WRITTEN)

    @classmethod
    def skipped(cls, artifact: Artifact) -> FetchResult:
        return cls(artifact, FetchStatus.SKIPPED)

    @classmethod
    def failed(cls, artifact: Artifact, error: ProvisionError) -> FetchResult:
        return cls(artifact, FetchStatus.FAILED, error)

    @property
    def is_fatal(self) -> bool:
        """True when this failure must stop the batch."""
        if self.status is not FetchStatus.FAILED:
            return False
        if self.error is not None and self.error.kind in _FATAL_KINDS:
            return True
        return self.artifact.critical


class ProvisionAborted(RuntimeError):
    """Raised when a critical artifact fails; carries the results so far."""

    def __init__(self, result: FetchResult, results: list[FetchResult]):
        super().__init__(
            f"Failed to install {result.artifact.display_name}: {result.error}"
        )
        self.result = result
        self.results = results


__all__ = [
    "Artifact",
    "Category",
    "ErrorKind",
    "FetchResult",
    "FetchStatus",
    "OverwritePolicy",
    "ProvisionAborted",
    "ProvisionError",
]
