# resumeforge/services/figma/client.py
"""Figma data access: the REST API when a token is configured, canned data otherwise.

Both clients expose the same four capabilities the adapter needs:
``get_file_info``, ``get_nodes``, ``search_nodes`` and ``get_styles``.
"""
from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from resumeforge.core.config import settings
from resumeforge.core.errors import ExternalServiceError
from resumeforge.schemas.figma import FigmaFileInfo, FigmaNode, FigmaStyle

logger = logging.getLogger("figma.client")

STATUS_MESSAGES = {
    403: ("access_denied", "Access to the Figma file was denied. Check the link's sharing settings."),
    404: ("not_found", "The Figma file could not be found."),
    429: ("rate_limited", "Figma is rate limiting requests. Please try again in a moment."),
}


class FigmaAPIClient:
    def __init__(
        self,
        token: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        backoff_base_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.FIGMA_API_BASE).rstrip("/")
        self.timeout = timeout or settings.FIGMA_TIMEOUT_S
        self.max_retries = settings.FIGMA_MAX_RETRIES if max_retries is None else max_retries
        self.backoff_base_s = settings.FIGMA_BACKOFF_BASE_S if backoff_base_s is None else backoff_base_s
        self.session = session or requests.Session()
        self.session.headers.update({"X-Figma-Token": token})
        self._file_cache: Dict[str, Dict[str, Any]] = {}

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        attempt = 0
        while True:
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except (requests.Timeout, requests.ConnectionError) as e:
                attempt += 1
                if attempt > self.max_retries:
                    logger.error("Figma request %s failed after %d retries: %s", path, self.max_retries, e)
                    raise ExternalServiceError(
                        "The Figma API is currently unreachable. Please try again later.",
                        details="unavailable",
                    ) from e
                sleep_for = self.backoff_base_s * (2 ** (attempt - 1)) + random.uniform(0, 0.25)
                logger.warning("Figma transient error: %s; retrying in %.2fs (attempt %d/%d)", e, sleep_for, attempt, self.max_retries)
                time.sleep(sleep_for)
                continue
            except requests.RequestException as e:
                logger.error("Figma request %s failed: %s", path, e)
                raise ExternalServiceError("The Figma API request failed.", details="request_error") from e

            if response.status_code in STATUS_MESSAGES:
                kind, message = STATUS_MESSAGES[response.status_code]
                status = 429 if kind == "rate_limited" else 502
                raise ExternalServiceError(message, status_code=status, details=kind)
            if response.status_code >= 400:
                logger.error("Figma API %s returned %s: %s", path, response.status_code, response.text[:300])
                raise ExternalServiceError("The Figma API returned an error.", details=f"status {response.status_code}")
            try:
                data = response.json()
            except ValueError as e:
                logger.error("Figma API %s returned a non-JSON body: %s", path, e)
                raise ExternalServiceError("The Figma API returned an unreadable response.", details="invalid_response") from e
            if not isinstance(data, dict):
                raise ExternalServiceError("The Figma API returned an unreadable response.", details="invalid_response")
            return data

    def clear_cache(self) -> None:
        """Drop fetched file documents; the adapter calls this after every adaptation."""
        self._file_cache.clear()

    def _file(self, file_key: str) -> Dict[str, Any]:
        if file_key not in self._file_cache:
            self._file_cache[file_key] = self._get(f"/files/{file_key}")
        return self._file_cache[file_key]

    def get_file_info(self, file_key: str) -> FigmaFileInfo:
        data = self._file(file_key)
        return FigmaFileInfo(
            name=data.get("name") or file_key,
            last_modified=data.get("lastModified"),
            version=data.get("version"),
            role=data.get("role"),
            editor_type=data.get("editorType"),
            link_access=data.get("linkAccess"),
        )

    def get_nodes(self, file_key: str, node_ids: List[str]) -> List[FigmaNode]:
        # Links carry "1-2", the API wants "1:2"
        ids = ",".join(nid.replace("-", ":") for nid in node_ids)
        data = self._get(f"/files/{file_key}/nodes", params={"ids": ids})
        nodes = []
        for entry in (data.get("nodes") or {}).values():
            if entry and entry.get("document"):
                nodes.append(FigmaNode.model_validate(entry["document"]))
        return nodes

    def search_nodes(self, file_key: str, query: str) -> List[FigmaNode]:
        """Top-level nodes whose name or text contains ``query`` (case-insensitive)."""
        document = self._file(file_key).get("document") or {}
        needle = query.lower()
        found: List[FigmaNode] = []

        def walk(node: Dict[str, Any]) -> None:
            name = (node.get("name") or "").lower()
            text = (node.get("characters") or "").lower()
            if node.get("id") and (needle in name or needle in text):
                found.append(FigmaNode.model_validate(node))
                return
            for child in node.get("children") or []:
                walk(child)

        walk(document)
        return found

    def get_styles(self, file_key: str) -> List[FigmaStyle]:
        styles = self._file(file_key).get("styles") or {}
        return [
            FigmaStyle(key=s.get("key") or sid, name=s.get("name") or sid, style_type=s.get("styleType"), remote=bool(s.get("remote")))
            for sid, s in styles.items()
        ]


class MockFigmaClient:
    """Deterministic stand-in used when no Figma token is configured."""

    def clear_cache(self) -> None:
        pass

    def get_file_info(self, file_key: str) -> FigmaFileInfo:
        return FigmaFileInfo(
            name=f"Figma File {file_key}",
            last_modified=datetime.now(timezone.utc).isoformat(),
            version="1.0",
            role="owner",
            editor_type="figma",
            link_access="view",
        )

    def get_nodes(self, file_key: str, node_ids: List[str]) -> List[FigmaNode]:
        return [FigmaNode(id=nid, name=f"Node {nid}", type="FRAME", children=[]) for nid in node_ids]

    def search_nodes(self, file_key: str, query: str) -> List[FigmaNode]:
        return [
            FigmaNode(
                id="search-result-1",
                name=f'Search result for "{query}"',
                type="TEXT",
                characters=f'Found content matching "{query}"',
            )
        ]

    def get_styles(self, file_key: str) -> List[FigmaStyle]:
        return [FigmaStyle(key="style-1", name="Primary Text", style_type="TEXT", remote=False)]


def build_figma_client(token: Optional[str] = None):
    token = token if token is not None else settings.FIGMA_API_KEY
    if token:
        logger.info("Figma client: REST API at %s", settings.FIGMA_API_BASE)
        return FigmaAPIClient(token)
    logger.info("Figma client: FIGMA_API_KEY not set, using mock data")
    return MockFigmaClient()
