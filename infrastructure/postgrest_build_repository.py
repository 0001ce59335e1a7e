"""
PostgREST Build Repository

httpx-based implementation of BuildDataRepository. Reads Build and Asset
rows from a PostgREST endpoint and writes the publish status back onto
the Build row.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx

from domain.errors import DataLoadError, StatusPersistError
from domain.site_build.repositories import BuildDataRepository
from domain.site_build.value_objects import (
    AssetRef,
    BuildData,
    BuildInfo,
    Page,
    PublishStatus,
    StyleRule,
)

logger = logging.getLogger(__name__)


class PostgrestBuildRepository(BuildDataRepository):
    """
    Build data store backed by PostgREST.

    A pre-configured httpx.Client may be injected (tests use one with a
    MockTransport); otherwise a client is created per call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = httpx.Timeout(timeout_seconds)
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self._client is not None:
            response = self._client.request(method, url, headers=self._headers(), **kwargs)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(method, url, headers=self._headers(), **kwargs)
        response.raise_for_status()
        return response

    def load_build_data(self, build_id: str) -> BuildData:
        """
        Fetch build, pages, styles and assets for a build.

        Raises:
            DataLoadError: If the build is missing or the store cannot be read
        """
        try:
            rows = self._request("GET", "/Build", params={"id": f"eq.{build_id}"}).json()
            if not rows:
                raise DataLoadError(f"Build not found: {build_id}")
            row = rows[0]

            project_id = str(row.get("projectId") or "")
            asset_rows: List[Dict[str, Any]] = []
            if project_id:
                asset_rows = self._request(
                    "GET", "/Asset", params={"projectId": f"eq.{project_id}"}
                ).json()
        except DataLoadError:
            raise
        except httpx.HTTPError as e:
            raise DataLoadError(f"Failed to load build {build_id}: {e}", original_error=e)
        except ValueError as e:
            raise DataLoadError(f"Invalid response for build {build_id}: {e}", original_error=e)

        try:
            build_data = BuildData(
                build=BuildInfo(
                    id=str(row.get("id", build_id)),
                    project_id=project_id,
                    version=int(row.get("version") or 0),
                    created_at=row.get("createdAt"),
                ),
                pages=parse_pages(row.get("pages")),
                assets=tuple(AssetRef.from_dict(asset) for asset in asset_rows),
                styles=parse_styles(row.get("styles")),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise DataLoadError(f"Malformed build data for {build_id}: {e}", original_error=e)

        logger.info(f"Build data loaded for {build_id}, pages: {len(build_data.pages)}")
        return build_data

    def update_publish_status(self, build_id: str, status: PublishStatus) -> None:
        """
        Record the publish status on the Build row.

        Raises:
            StatusPersistError: If the update is rejected or the store is unreachable
        """
        payload = {
            "publishStatus": status.value,
            "updatedAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        try:
            self._request("PATCH", "/Build", params={"id": f"eq.{build_id}"}, json=payload)
        except httpx.HTTPError as e:
            raise StatusPersistError(
                f"Failed to set publish status {status.value} on build {build_id}: {e}",
                original_error=e,
            )


def _decode_json_field(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        return json.loads(value) if value else None
    return value


def parse_pages(raw: Any) -> Tuple[Page, ...]:
    """
    Parse the pages column.

    Accepts either a plain list of pages or the builder's
    {"homePage": {...}, "pages": [...]} document, with the home page first.
    """
    data = _decode_json_field(raw)
    if not data:
        return ()
    if isinstance(data, list):
        return tuple(Page.from_dict(page) for page in data)

    pages = []
    home_page = data.get("homePage")
    if home_page:
        pages.append(Page.from_dict(home_page))
    pages.extend(Page.from_dict(page) for page in data.get("pages") or [])
    return tuple(pages)


def parse_styles(raw: Any) -> Tuple[StyleRule, ...]:
    """Parse the styles column: a list of [key, value] pairs or of objects."""
    data = _decode_json_field(raw)
    if not data:
        return ()

    rules = []
    for item in data:
        if isinstance(item, (list, tuple)) and item:
            rules.append(StyleRule(key=str(item[0]), value=item[1] if len(item) > 1 else None))
        elif isinstance(item, dict):
            rules.append(StyleRule(key=str(item.get("id") or item.get("key") or ""), value=item))
        else:
            rules.append(StyleRule(key=str(item)))
    return tuple(rules)
