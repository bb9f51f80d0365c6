"""Shared test doubles and sample data."""

from __future__ import annotations

from agent_os_setup.provision.models import ErrorKind, ProvisionError

BASE_URL = "https://example.test/agent-os/main"

SAMPLE_CONFIG = """\
# Agent OS configuration
agent_os_version: 1.4.0

agents:
  claude_code:
    enabled: false
  cursor:
    enabled: false  # Cursor IDE
  github_copilot:
    enabled: false

project_types:
  default:
    instructions: ~/.agent-os/instructions
    standards: ~/.agent-os/standards

default_project_type: default
"""


class FakeFetcher:
    """In-memory fetcher: known URLs return bytes, anything else is a 404."""

    def __init__(self, files: dict[str, bytes] | None = None, errors: dict[str, ErrorKind] | None = None):
        self.files = dict(files or {})
        self.errors = dict(errors or {})
        self.calls: list[str] = []
        self.closed = False

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url in self.errors:
            raise ProvisionError(self.errors[url], f"Simulated {self.errors[url].value}", url)
        if url not in self.files:
            raise ProvisionError(ErrorKind.NOT_FOUND, "Remote file not found (404)", url)
        return self.files[url]

    def close(self) -> None:
        self.closed = True


class CatchAllFetcher(FakeFetcher):
    """Serves generated content for every URL except the configured errors."""

    def fetch(self, url: str) -> bytes:
        if url not in self.files and url not in self.errors:
            if url.endswith("config.yml"):
                self.files[url] = SAMPLE_CONFIG.encode()
            else:
                self.files[url] = f"content of {url}\n".encode()
        return super().fetch(url)
