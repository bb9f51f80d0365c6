"""Idempotent provisioning of remote artifacts into the install tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from agent_os_setup.provision.fetcher import Fetcher
from agent_os_setup.provision.filesystem import (
    atomic_write_bytes,
    ensure_directory,
    is_within,
    make_executable,
)
from agent_os_setup.provision.models import (
    Artifact,
    ErrorKind,
    FetchResult,
    OverwritePolicy,
    ProvisionAborted,
    ProvisionError,
)

logger = logging.getLogger(__name__)

ResultCallback = Callable[[FetchResult], None]


class Provisioner:
    """Place remote artifacts on disk according to an overwrite policy.

    Args:
        fetcher: Source of remote bytes
        install_root: When set, destinations outside this tree are refused
    """

    def __init__(self, fetcher: Fetcher, install_root: Path | None = None):
        self.fetcher = fetcher
        self.install_root = install_root

    def provision(self, artifact: Artifact, policy: OverwritePolicy) -> FetchResult:
        """Fetch, skip or overwrite a single artifact.

        An existing destination whose category may not be overwritten is
        skipped without touching the network or the filesystem. Failures
        never leave a truncated destination behind.
        """
        path = artifact.local_path
        if path.is_file() and not policy.allows(artifact.category):
            logger.debug("Skipping %s (exists, overwrite disabled)", path)
            return FetchResult.skipped(artifact)

        if self.install_root is not None and not is_within(path, self.install_root):
            return FetchResult.failed(
                artifact,
                ProvisionError(
                    ErrorKind.PERMISSION_DENIED,
                    "Destination is outside the install directory",
                    str(path),
                ),
            )

        try:
            ensure_directory(path.parent)
            data = self.fetcher.fetch(artifact.remote_url)
            atomic_write_bytes(path, data)
            if artifact.executable:
                make_executable(path)
        except ProvisionError as e:
            logger.warning("Failed to fetch %s: %s", artifact.remote_url, e)
            return FetchResult.failed(artifact, e)
        except PermissionError as e:
            logger.warning("Cannot write %s: %s", path, e)
            return FetchResult.failed(
                artifact,
                ProvisionError(ErrorKind.PERMISSION_DENIED, f"Permission denied: {e.strerror or e}", str(path)),
            )
        except OSError as e:
            logger.warning("Cannot write %s: %s", path, e)
            return FetchResult.failed(
                artifact,
                ProvisionError(ErrorKind.IO_ERROR, f"Write failed: {e.strerror or e}", str(path)),
            )

        logger.debug("Wrote %s", path)
        return FetchResult.written(artifact)

    def provision_all(
        self,
        manifest: Iterable[Artifact],
        policy: OverwritePolicy,
        on_result: ResultCallback | None = None,
    ) -> list[FetchResult]:
        """Provision every artifact in manifest order.

        Failures on optional artifacts are recorded and the batch goes on.

        Raises:
            ProvisionAborted: A critical artifact failed, or a destination
                was not writable. Carries the results gathered so far.
        """
        results: list[FetchResult] = []
        for artifact in manifest:
            result = self.provision(artifact, policy)
            results.append(result)
            if on_result is not None:
                on_result(result)
            if result.is_fatal:
                logger.error("Aborting installation: %s", result.error)
                raise ProvisionAborted(result, results)
        return results


__all__ = ["Provisioner"]
