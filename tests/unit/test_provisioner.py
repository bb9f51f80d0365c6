"""Tests for agent_os_setup.provision.provisioner."""

from __future__ import annotations

import hashlib
import os
import stat
from pathlib import Path

import pytest

from agent_os_setup.provision import (
    Artifact,
    Category,
    ErrorKind,
    FetchStatus,
    OverwritePolicy,
    ProvisionAborted,
    Provisioner,
)
from tests.utils import BASE_URL, FakeFetcher

ALL_FALSE = OverwritePolicy({category: False for category in Category})
ALL_TRUE = OverwritePolicy({category: True for category in Category})


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _leftover_temp_files(root: Path) -> list[Path]:
    return [p for p in root.rglob("*.tmp")]


class TestProvision:
    def test_missing_destination_is_written(self, three_artifacts, fake_fetcher):
        artifact = three_artifacts[0]
        result = Provisioner(fake_fetcher).provision(artifact, ALL_FALSE)

        assert result.status is FetchStatus.WRITTEN
        assert artifact.local_path.read_bytes() == b"remote create-spec.md\n"

    def test_missing_destination_with_failed_fetch_is_failed_not_skipped(self, three_artifacts):
        artifact = three_artifacts[0]
        result = Provisioner(FakeFetcher()).provision(artifact, ALL_FALSE)

        assert result.status is FetchStatus.FAILED
        assert result.error.kind is ErrorKind.NOT_FOUND
        assert not artifact.local_path.exists()

    def test_existing_destination_skipped_when_policy_false(self, three_artifacts, fake_fetcher):
        artifact = three_artifacts[1]
        artifact.local_path.parent.mkdir(parents=True)
        artifact.local_path.write_bytes(b"local edits\n")
        before = _digest(artifact.local_path)

        result = Provisioner(fake_fetcher).provision(artifact, ALL_FALSE)

        assert result.status is FetchStatus.SKIPPED
        assert _digest(artifact.local_path) == before
        assert fake_fetcher.calls == []

    def test_existing_destination_overwritten_when_policy_true(self, three_artifacts, fake_fetcher):
        artifact = three_artifacts[1]
        artifact.local_path.parent.mkdir(parents=True)
        artifact.local_path.write_bytes(b"local edits\n")

        result = Provisioner(fake_fetcher).provision(artifact, ALL_TRUE)

        assert result.status is FetchStatus.WRITTEN
        assert artifact.local_path.read_bytes() == b"remote tech-stack.md\n"

    def test_policy_is_per_category(self, three_artifacts, fake_fetcher):
        for artifact in three_artifacts:
            artifact.local_path.parent.mkdir(parents=True, exist_ok=True)
            artifact.local_path.write_bytes(b"old\n")
        policy = OverwritePolicy({Category.STANDARDS: True})

        statuses = [Provisioner(fake_fetcher).provision(a, policy).status for a in three_artifacts]

        assert statuses == [FetchStatus.SKIPPED, FetchStatus.WRITTEN, FetchStatus.SKIPPED]

    def test_failed_fetch_keeps_existing_content(self, three_artifacts, install_root):
        artifact = three_artifacts[2]
        artifact.local_path.write_bytes(b"user config\n")
        fetcher = FakeFetcher(errors={artifact.remote_url: ErrorKind.TIMEOUT})

        result = Provisioner(fetcher).provision(artifact, ALL_TRUE)

        assert result.status is FetchStatus.FAILED
        assert result.error.kind is ErrorKind.TIMEOUT
        assert artifact.local_path.read_bytes() == b"user config\n"
        assert _leftover_temp_files(install_root) == []

    def test_executable_artifact_gets_execute_bit(self, install_root):
        artifact = Artifact(
            f"{BASE_URL}/setup/project.sh",
            install_root / "setup" / "project.sh",
            Category.PROJECT_SCRIPT,
            executable=True,
        )
        fetcher = FakeFetcher({artifact.remote_url: b"#!/bin/bash\necho hi\n"})

        result = Provisioner(fetcher).provision(artifact, ALL_FALSE)

        assert result.status is FetchStatus.WRITTEN
        if os.name != "nt":
            assert artifact.local_path.stat().st_mode & stat.S_IXUSR

    def test_destination_outside_install_root_is_refused(self, tmp_path, install_root):
        artifact = Artifact(f"{BASE_URL}/x.md", tmp_path / "elsewhere" / "x.md", Category.INSTRUCTIONS)
        fetcher = FakeFetcher({artifact.remote_url: b"x"})

        result = Provisioner(fetcher, install_root=install_root).provision(artifact, ALL_TRUE)

        assert result.status is FetchStatus.FAILED
        assert result.error.kind is ErrorKind.PERMISSION_DENIED
        assert fetcher.calls == []
        assert not artifact.local_path.exists()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_overwrite_keeps_file_mode(self, three_artifacts, fake_fetcher):
        artifact = three_artifacts[1]
        artifact.local_path.parent.mkdir(parents=True)
        artifact.local_path.write_bytes(b"local edits\n")
        artifact.local_path.chmod(0o644)

        result = Provisioner(fake_fetcher).provision(artifact, ALL_TRUE)

        assert result.status is FetchStatus.WRITTEN
        assert artifact.local_path.stat().st_mode & 0o777 == 0o644

    @pytest.mark.skipif(os.name == "nt", reason="Windows reports replacing a directory as access denied")
    def test_directory_at_destination_is_io_error(self, three_artifacts, fake_fetcher, install_root):
        artifact = three_artifacts[1]
        artifact.local_path.mkdir(parents=True)

        result = Provisioner(fake_fetcher).provision(artifact, ALL_FALSE)

        assert result.status is FetchStatus.FAILED
        assert result.error.kind is ErrorKind.IO_ERROR
        assert result.is_fatal
        assert artifact.local_path.is_dir()
        assert _leftover_temp_files(install_root) == []

    def test_parent_path_is_a_file_is_io_error(self, three_artifacts, fake_fetcher):
        artifact = three_artifacts[1]
        artifact.local_path.parent.write_bytes(b"not a directory\n")

        result = Provisioner(fake_fetcher).provision(artifact, ALL_TRUE)

        assert result.status is FetchStatus.FAILED
        assert result.error.kind is ErrorKind.IO_ERROR
        assert result.is_fatal

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="POSIX permissions, non-root only")
    def test_unwritable_directory_is_permission_denied(self, install_root):
        locked = install_root / "locked"
        locked.mkdir()
        locked.chmod(0o500)
        artifact = Artifact(f"{BASE_URL}/a.md", locked / "a.md", Category.INSTRUCTIONS)
        try:
            result = Provisioner(FakeFetcher({artifact.remote_url: b"a"})).provision(artifact, ALL_TRUE)
        finally:
            locked.chmod(0o700)

        assert result.status is FetchStatus.FAILED
        assert result.error.kind is ErrorKind.PERMISSION_DENIED
        assert result.is_fatal


class TestProvisionAll:
    def test_empty_directory_all_written(self, three_artifacts, fake_fetcher):
        results = Provisioner(fake_fetcher).provision_all(three_artifacts, ALL_FALSE)

        assert [r.status for r in results] == [FetchStatus.WRITTEN] * 3
        for artifact in three_artifacts:
            assert artifact.local_path.read_bytes() == fake_fetcher.files[artifact.remote_url]

    def test_prepopulated_directory_all_skipped(self, three_artifacts, fake_fetcher):
        digests = {}
        for artifact in three_artifacts:
            artifact.local_path.parent.mkdir(parents=True, exist_ok=True)
            artifact.local_path.write_bytes(f"pre-existing {artifact.label}\n".encode())
            digests[artifact.local_path] = _digest(artifact.local_path)

        results = Provisioner(fake_fetcher).provision_all(three_artifacts, ALL_FALSE)

        assert [r.status for r in results] == [FetchStatus.SKIPPED] * 3
        assert {a.local_path: _digest(a.local_path) for a in three_artifacts} == digests

    def test_optional_failure_does_not_stop_batch(self, three_artifacts, fake_fetcher):
        del fake_fetcher.files[three_artifacts[0].remote_url]
        seen = []

        results = Provisioner(fake_fetcher).provision_all(three_artifacts, ALL_FALSE, on_result=seen.append)

        assert [r.status for r in results] == [FetchStatus.FAILED, FetchStatus.WRITTEN, FetchStatus.WRITTEN]
        assert results[0].error.kind is ErrorKind.NOT_FOUND
        assert seen == results

    def test_critical_failure_aborts_immediately(self, install_root, fake_fetcher, three_artifacts):
        critical = Artifact(
            f"{BASE_URL}/setup/functions.sh",
            install_root / "setup" / "functions.sh",
            Category.PROJECT_SCRIPT,
            critical=True,
        )
        manifest = [critical, *three_artifacts]

        with pytest.raises(ProvisionAborted) as excinfo:
            Provisioner(fake_fetcher).provision_all(manifest, ALL_FALSE)

        assert excinfo.value.result.artifact == critical
        assert len(excinfo.value.results) == 1
        assert not any(a.local_path.exists() for a in three_artifacts)
