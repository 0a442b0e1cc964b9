"""Gerrit transports: the SSH query protocol and the HTTP REST API.

Both are reduced to one operation, perform_query(), which returns the list
of raw change records. Each transport has its own framing to strip before
the payload is valid JSON:

  SSH   one JSON object per line, followed by a statistics line
  HTTP  a JSON array preceded by the )]}' anti-XSSI line
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Iterator

import requests
from rich.console import Console

from gerritpick_core.commit import CommitRecord, parse_commits
from gerritpick_core.errors import ConfigError, ParseError, TransportError
from gerritpick_core.models import EndpointKind
from gerritpick_core.utils.process import Runner, run_command

console = Console()
logger = logging.getLogger(__name__)

_SSH_FLAGS = "--format=JSON --current-patch-set --files --commit-message"
_HTTP_FIELDS = "o=CURRENT_REVISION&o=CURRENT_COMMIT&o=CURRENT_FILES"
_HTTP_TIMEOUT = 30


@dataclass(frozen=True)
class RemoteEndpoint:
    kind: EndpointKind
    address: str

    @classmethod
    def from_url(cls, url: str) -> RemoteEndpoint:
        if url.startswith("ssh://"):
            return cls(EndpointKind.SSH, url)
        if url.startswith(("http://", "https://")):
            return cls(EndpointKind.HTTP, url if url.endswith("/") else url + "/")
        raise ConfigError(f"Invalid Gerrit URL {url!r}: must start with ssh://, http:// or https://.")

    def full_url(self, query: str) -> str:
        if self.kind is EndpointKind.SSH:
            return f"{self.address} gerrit query {_SSH_FLAGS} {query}"
        return f"{self.address}changes/?q={query.replace(' ', '+')}&{_HTTP_FIELDS}"


def trim_ssh_output(stdout: str) -> str:
    """Drop the trailing statistics line and wrap the rest as a JSON array."""
    lines = stdout.splitlines()
    # Last line is {"type":"stats",...}
    lines = lines[:-1]
    return "[" + ",".join(line for line in lines if line.strip()) + "]"


def trim_http_body(body: str) -> str:
    """Discard the first line, the )]}' marker Gerrit puts in front of JSON."""
    return body.split("\n", 1)[1] if "\n" in body else ""


def _load_array(payload: str) -> list[dict]:
    if not payload.strip():
        return []
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ParseError(f"Gerrit returned malformed JSON: {e}") from e
    if not isinstance(data, list):
        raise ParseError(f"Expected a JSON array of changes, got {type(data).__name__}.")
    return data


@dataclass
class RemoteClient:
    """Runs queries against one Gerrit endpoint.

    runner and session are injectable so tests never spawn ssh or open sockets.
    """

    endpoint: RemoteEndpoint
    runner: Runner = run_command
    session: requests.Session = field(default_factory=requests.Session)
    debug: bool = False

    @property
    def kind(self) -> EndpointKind:
        return self.endpoint.kind

    def perform_query(self, query: str) -> list[dict]:
        url = self.endpoint.full_url(query)
        if self.debug:
            console.print(f"Url: {url}", markup=False, style="dim", soft_wrap=True)
        logger.debug("Querying %s", url)
        if self.kind is EndpointKind.SSH:
            payload = self._query_ssh(url)
        else:
            payload = self._query_http(url)
        return _load_array(payload)

    def iter_commits(self, query: str) -> Iterator[CommitRecord]:
        """Parse records one at a time so a consumer can start before the last one."""
        return parse_commits(self.kind, self.perform_query(query))

    def query_commits(self, query: str) -> list[CommitRecord]:
        return list(self.iter_commits(query))

    def query_commits_lenient(self, query: str) -> list[CommitRecord]:
        """Like query_commits, but a failed or unparsable query yields no commits."""
        try:
            return self.query_commits(query)
        except (TransportError, ParseError) as e:
            logger.warning("Ignoring failed query %r: %s", query, e)
            return []

    def _query_ssh(self, url: str) -> str:
        result = self.runner(["ssh", *url.split()])
        if not result.ok:
            raise TransportError(f"ssh query to {self.endpoint.address} failed: {result.stderr.strip()}")
        return trim_ssh_output(result.stdout)

    def _query_http(self, url: str) -> str:
        # requests picks up credentials from ~/.netrc when no auth is given.
        try:
            response = self.session.get(
                url,
                headers={"Content-Type": "application/json"},
                timeout=_HTTP_TIMEOUT,
            )
        except requests.RequestException as e:
            raise TransportError(f"HTTP query to {self.endpoint.address} failed: {e}") from e
        if response.status_code >= 400:
            raise TransportError(f"Gerrit returned HTTP {response.status_code} for {url}")
        return trim_http_body(response.text)
