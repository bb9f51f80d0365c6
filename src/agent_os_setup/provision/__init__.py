"""File-provisioning engine: models, fetcher, manifest and provisioner."""

from .fetcher import Fetcher, HttpFetcher
from .manifest import build_manifest
from .models import (
    Artifact,
    Category,
    ErrorKind,
    FetchResult,
    FetchStatus,
    OverwritePolicy,
    ProvisionAborted,
    ProvisionError,
)
from .provisioner import Provisioner

__all__ = [
    "Artifact",
    "Category",
    "ErrorKind",
    "FetchResult",
    "FetchStatus",
    "Fetcher",
    "HttpFetcher",
    "OverwritePolicy",
    "ProvisionAborted",
    "ProvisionError",
    "Provisioner",
    "build_manifest",
]
