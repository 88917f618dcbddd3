"""
Fetchers for PG listing rows.

The listings live in a Google Sheet behind a small HTTP API. Each sheet row
comes back as a flat mapping of column header -> cell text.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from config import SheetSource

logger = logging.getLogger(__name__)

# One spreadsheet row: column header -> cell text.
Row = dict[str, str]


# ── Base Fetcher ────────────────────────────────────────────────────────────

class BaseFetcher(ABC):
    """Abstract base for all row fetchers."""

    def __init__(self, source: SheetSource):
        self.source = source
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @abstractmethod
    def fetch(self) -> Optional[list[Row]]:
        """Fetch all rows of the configured sheet.

        Returns None when the source could not deliver any data, so callers
        can tell "failed" apart from "sheet is empty".
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        ...

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _safe_request(self, method: str, url: str, **kwargs) -> Optional[Any]:
        """Make an API request with error handling and rate limiting."""
        try:
            resp = self.session.request(method, url, timeout=self.source.timeout, **kwargs)
            if resp.status_code == 429:
                logger.warning(f"[{self.source_name}] Rate limited. Waiting 60s...")
                time.sleep(60)
                resp = self.session.request(method, url, timeout=self.source.timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"[{self.source_name}] HTTP {e.response.status_code}: {e}")
        except requests.exceptions.RequestException as e:
            logger.error(f"[{self.source_name}] Request failed: {e}")
        except ValueError:
            logger.error(f"[{self.source_name}] Invalid JSON response")
        return None


# ── Google Sheet Fetcher ────────────────────────────────────────────────────

class GoogleSheetFetcher(BaseFetcher):
    """
    Fetches one sheet from the listings API.
    Response body: {"success": bool, "data": [row, ...]}
    """

    source_name = "google-sheet"

    def fetch(self) -> Optional[list[Row]]:
        payload = self._safe_request(
            "GET", self.source.endpoint, params={"sheet": self.source.sheet}
        )
        if payload is None:
            return None

        if not isinstance(payload, dict) or not payload.get("success"):
            logger.warning(f"[{self.source_name}] Sheet '{self.source.sheet}' not served (success=false)")
            return None

        data = payload.get("data")
        if not isinstance(data, list):
            logger.error(f"[{self.source_name}] Unexpected 'data' field: {type(data).__name__}")
            return None

        rows: list[Row] = []
        for item in data:
            row = _normalize(item)
            if row is None:
                logger.debug(f"[{self.source_name}] Skipping malformed row: {item!r}")
                continue
            rows.append(row)

        logger.info(f"[{self.source_name}] Fetched {len(rows)} rows from '{self.source.sheet}'")
        return rows


def _normalize(item: Any) -> Optional[Row]:
    """Coerce one JSON row to str -> str, dropping null cells."""
    if not isinstance(item, dict):
        return None
    return {str(k): str(v) for k, v in item.items() if v is not None}


def fetch_sheet(source: SheetSource) -> Optional[list[Row]]:
    """Fetch the configured sheet with a throwaway fetcher."""
    with GoogleSheetFetcher(source) as fetcher:
        try:
            return fetcher.fetch()
        except Exception as e:
            logger.error(f"[{fetcher.source_name}] Unexpected error: {e}")
            return None
