from __future__ import annotations

from pathlib import Path

import pytest

from agent_os_setup.provision.models import Artifact, Category
from tests.utils import BASE_URL, SAMPLE_CONFIG, FakeFetcher


@pytest.fixture()
def install_root(tmp_path: Path) -> Path:
    root = tmp_path / ".agent-os"
    root.mkdir()
    return root


@pytest.fixture()
def three_artifacts(install_root: Path) -> list[Artifact]:
    return [
        Artifact(
            f"{BASE_URL}/instructions/core/create-spec.md",
            install_root / "instructions" / "core" / "create-spec.md",
            Category.INSTRUCTIONS,
        ),
        Artifact(
            f"{BASE_URL}/standards/tech-stack.md",
            install_root / "standards" / "tech-stack.md",
            Category.STANDARDS,
        ),
        Artifact(f"{BASE_URL}/config.yml", install_root / "config.yml", Category.CONFIG),
    ]


@pytest.fixture()
def fake_fetcher(three_artifacts: list[Artifact]) -> FakeFetcher:
    return FakeFetcher({a.remote_url: f"remote {a.local_path.name}\n".encode() for a in three_artifacts})


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path
