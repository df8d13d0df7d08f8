"""Directive source adapters.

Implements the core DirectiveSourcePort for inline config text, local files
and HTTP(S) documents.
"""

from __future__ import annotations

import base64
import logging
import urllib.error
import urllib.request
from typing import Iterable, Optional

from reminders.core.config import SourceConfig
from reminders.core.errors import SourceError
from reminders.core.ports import DirectiveSourcePort

LOGGER = logging.getLogger(__name__)


class InlineSource:
    """Reminder lines written directly in the config file."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._text = "\n".join(lines)

    def fetch(self) -> str:
        return self._text


class LocalFileSource:
    """A notes or to-do file on local disk."""

    def __init__(self, path: str) -> None:
        self._path = path

    def fetch(self) -> str:
        try:
            with open(self._path, "r", encoding="utf-8") as handle:
                return handle.read()
        except OSError as exc:
            raise SourceError(f"Failed to read reminder file {self._path}: {exc}") from exc


class HttpSource:
    """A remote document fetched with GET, optionally with basic auth."""

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10,
    ) -> None:
        self._url = url
        self._username = username
        self._password = password
        self._timeout = timeout

    def _request(self) -> urllib.request.Request:
        request = urllib.request.Request(self._url, method="GET")
        if self._username is not None and self._password is not None:
            token = f"{self._username}:{self._password}".encode("utf-8")
            request.add_header("Authorization", "Basic " + base64.b64encode(token).decode("ascii"))
        return request

    def fetch(self) -> str:
        LOGGER.debug("Fetching reminders from %s", self._url)
        try:
            with urllib.request.urlopen(self._request(), timeout=self._timeout) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    raise SourceError(f"HTTP {status} fetching {self._url}")
                charset = response.headers.get_content_charset() or "utf-8"
                return response.read().decode(charset, errors="replace")
        except urllib.error.HTTPError as e:
            raise SourceError(f"HTTP {e.code} fetching {self._url}") from e
        except (urllib.error.URLError, OSError) as e:
            raise SourceError(f"Failed to fetch {self._url}: {e}") from e
        except LookupError as e:
            raise SourceError(f"Unsupported charset fetching {self._url}: {e}") from e


def build_sources(config: SourceConfig) -> list[DirectiveSourcePort]:
    """Select source adapters from config, in scan order: inline lines, then the file.

    Callers scan each source before fetching the next, so a failing file
    never hides the inline reminders.
    """

    sources: list[DirectiveSourcePort] = []
    if config.inline:
        sources.append(InlineSource(config.inline))

    if config.file:
        if config.file.startswith(("http://", "https://")):
            if config.http_auth == "basic":
                sources.append(
                    HttpSource(
                        config.file,
                        username=config.http_username,
                        password=config.http_password,
                        timeout=config.timeout_seconds,
                    )
                )
            else:
                sources.append(HttpSource(config.file, timeout=config.timeout_seconds))
        else:
            sources.append(LocalFileSource(config.file))

    return sources
