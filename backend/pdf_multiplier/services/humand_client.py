"""Humand HR API client (segmentations, users, folders, document upload)"""
import asyncio
import json
import httpx
from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Sequence
import logging
from ..exceptions import HumandAPIError
from ..models.humand import Folder, Segmentation, SegmentationItem, UploadResponse
from ..models.recipient import Recipient
from .cache import NullCache, ResponseCache

logger = logging.getLogger(__name__)

SEGMENTATIONS_ENDPOINT = "/segmentations"
SEGMENTATION_USERS_ENDPOINT = "/segmentations/users"
UPLOAD_DOCUMENT_ENDPOINT = "/users/{user_id}/documents"


class RedashConfig(BaseModel):
    """Where the folder catalog query lives"""
    base_url: str = "https://redash.humand.co/api/queries"
    api_key: Optional[str] = None
    folders_query_id: str = "17520"
    timeout: float = 30.0
    refresh_wait_time: float = 2.0


class HumandClient:
    """Client for the Humand public API"""

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str],
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        upload_timeout: float = 300.0,
        cache: Optional[ResponseCache] = None,
        redash: Optional[RedashConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Humand client

        Args:
            base_url: Humand API base URL
            api_token: Token sent as Basic authorization
            timeout: Default request timeout in seconds
            max_retries: Retries for 5xx responses and timeouts
            retry_delay: Base delay between retries, multiplied by the attempt number
            upload_timeout: Timeout for document uploads
            cache: Cache for catalog lookups (no caching if omitted)
            redash: Folder catalog query settings
            http_client: Preconfigured httpx client (tests pass a mock transport here)
        """
        self.base_url = base_url
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.upload_timeout = upload_timeout
        self.cache = cache if cache is not None else NullCache()
        self.redash = redash or RedashConfig()

        headers = {"Accept": "application/json"}
        if api_token:
            headers["Authorization"] = f"Basic {api_token}"
        else:
            logger.warning("Humand API token not configured - requests will be unauthenticated")

        if http_client is None:
            http_client = httpx.AsyncClient(base_url=base_url, timeout=timeout)
        http_client.headers.update(headers)
        self.client = http_client
        logger.info(f"HumandClient initialized for {base_url}")

    async def aclose(self):
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, retrying server errors and timeouts"""
        attempt = 0
        while True:
            try:
                response = await self.client.request(method, url, **kwargs)
                if response.status_code >= 500 and attempt < self.max_retries:
                    attempt += 1
                    logger.warning(f"{method} {url} returned {response.status_code}, retry {attempt}/{self.max_retries}")
                    await asyncio.sleep(self.retry_delay * attempt)
                    continue
                response.raise_for_status()
                return response
            except httpx.TimeoutException as e:
                if attempt < self.max_retries:
                    attempt += 1
                    logger.warning(f"{method} {url} timed out, retry {attempt}/{self.max_retries}")
                    await asyncio.sleep(self.retry_delay * attempt)
                    continue
                raise HumandAPIError(f"Request to {url} timed out: {e}") from e
            except httpx.HTTPStatusError as e:
                raise HumandAPIError(
                    f"Request to {url} failed with status {e.response.status_code}",
                    status_code=e.response.status_code,
                ) from e
            except httpx.HTTPError as e:
                raise HumandAPIError(f"Request to {url} failed: {e}") from e

    async def get_segmentations(self) -> List[Segmentation]:
        """Get segmentation groups that have at least one item"""
        cached = self.cache.get("segmentations")
        if cached is not None:
            return cached

        logger.info("Fetching segmentations")
        response = await self._request("GET", SEGMENTATIONS_ENDPOINT)
        segmentations = self._parse_segmentations(response.json())

        self.cache.set("segmentations", segmentations)
        logger.info(f"Found {len(segmentations)} segmentation groups")
        return segmentations

    def _parse_segmentations(self, raw: Any) -> List[Segmentation]:
        if not isinstance(raw, list):
            raise HumandAPIError("Invalid segmentations payload: expected a list")

        groups = []
        for group in raw:
            items = [
                SegmentationItem(
                    name=str(item["id"]),
                    item_name=item.get("sharedId") or item.get("name") or f"Item_{item['id']}",
                    display_name=item.get("name") or f"Item {item['id']}",
                    user_count=item.get("usersCount") or 0,
                )
                for item in group.get("items") or []
            ]
            if not items:
                continue
            groups.append(Segmentation(
                group=str(group["id"]),
                group_name=group.get("sharedId") or group.get("name") or f"Group_{group['id']}",
                display_name=group.get("name") or f"Group {group['id']}",
                items=items,
            ))
        return groups

    async def get_segmentation_users(self, item_ids: Sequence[str], limit: int = 500) -> List[Recipient]:
        """
        Get users belonging to the given segmentation items

        Args:
            item_ids: Segmentation item ids
            limit: Maximum number of users requested

        Returns:
            List of Recipient objects, in API order
        """
        ids = ",".join(str(i) for i in item_ids)
        cache_key = f"users_{ids}_{limit}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        logger.info(f"Fetching users for segmentation items: {ids}")
        response = await self._request(
            "GET",
            SEGMENTATION_USERS_ENDPOINT,
            params={"segmentationItemIds": ids, "limit": limit},
        )
        data = response.json()
        items = data.get("items") if isinstance(data, dict) else None
        users = [Recipient.from_humand(item) for item in items or []]

        self.cache.set(cache_key, users)
        logger.info(f"Found {len(users)} users")
        return users

    async def get_users_for_segmentations(self, item_ids: Sequence[str]) -> List[Recipient]:
        """Users of several segmentation items, de-duplicated, first occurrence kept"""
        if not item_ids:
            return []

        users = await self.get_segmentation_users(item_ids)

        unique_users = []
        seen = set()
        for user in users:
            user_id = user.id or user.employee_internal_id
            if user_id and user_id not in seen:
                seen.add(user_id)
                unique_users.append(user)

        if len(unique_users) != len(users):
            logger.debug(f"Dropped {len(users) - len(unique_users)} duplicate or anonymous users")
        return unique_users

    async def get_folders(self) -> List[Folder]:
        """Get the document folder catalog from the Redash query"""
        cached = self.cache.get("folders")
        if cached is not None:
            return cached

        await self._refresh_redash_query()

        url = f"{self.redash.base_url}/{self.redash.folders_query_id}/results.json"
        logger.info("Fetching folders from Redash")
        response = await self._request(
            "GET",
            url,
            params={"api_key": self.redash.api_key or "", "max_age": 0},
            headers=self._redash_headers(),
            timeout=self.redash.timeout,
        )
        folders = self._parse_folders(response.json())

        self.cache.set("folders", folders)
        logger.info(f"Found {len(folders)} folders")
        return folders

    def _redash_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Key {self.redash.api_key or ''}", "Accept": "application/json"}

    async def _refresh_redash_query(self) -> None:
        """Ask Redash to re-run the folders query; stale data is used if this fails"""
        url = f"{self.redash.base_url}/{self.redash.folders_query_id}/refresh"
        try:
            response = await self.client.post(
                url,
                json={},
                headers=self._redash_headers(),
                timeout=self.redash.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Redash refresh failed, using existing results: {e}")
            return

        if self.redash.refresh_wait_time > 0:
            await asyncio.sleep(self.redash.refresh_wait_time)

    def _parse_folders(self, raw: Any) -> List[Folder]:
        query_result = (raw or {}).get("query_result") or {}
        rows = (query_result.get("data") or {}).get("rows") or []

        folders = []
        for index, row in enumerate(rows):
            if isinstance(row, (list, tuple)):
                padded = list(row) + [None] * (5 - len(row))
                folder_id, name, description, parent_id, created_at = padded[:5]
            elif isinstance(row, dict):
                folder_id = row.get("folder_id") or row.get("id")
                name = row.get("folder_name") or row.get("name")
                description = row.get("description")
                parent_id = row.get("parent_id")
                created_at = row.get("created_at")
            else:
                continue

            if not folder_id:
                continue
            folders.append(Folder(
                id=folder_id,
                name=name or f"Folder_{index + 1}",
                description=description or "",
                parent_id=parent_id or None,
                created_at=str(created_at) if created_at else None,
            ))
        return folders

    async def upload_document(
        self,
        user_id: str,
        content: bytes,
        filename: str,
        folder_id: Any,
        signature_status: str = "SIGNATURE_NOT_NEEDED",
        signature_coordinates: Optional[List[Dict[str, Any]]] = None,
        send_notification: bool = False,
    ) -> UploadResponse:
        """
        Upload one PDF to a user's document folder

        HTTP failures are returned in the response instead of raised, so a
        batch can keep going.
        """
        endpoint = UPLOAD_DOCUMENT_ENDPOINT.format(user_id=user_id)
        data = {
            "folderId": str(folder_id),
            "name": filename,
            "sendNotification": "true" if send_notification else "false",
            "signatureStatus": signature_status,
            "allowDisagreement": "false",
        }
        if signature_coordinates:
            data["signatureCoordinates"] = json.dumps(signature_coordinates)

        try:
            response = await self._request(
                "POST",
                endpoint,
                data=data,
                files={"file": (filename, content, "application/pdf")},
                timeout=self.upload_timeout,
            )
        except HumandAPIError as e:
            logger.error(f"Error uploading {filename} for user {user_id}: {e}")
            return UploadResponse(success=False, error=e.message, status_code=e.status_code)

        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        logger.debug(f"Uploaded {filename} for user {user_id}")
        return UploadResponse(success=True, data=payload, status_code=response.status_code)

    def clear_cache(self):
        self.cache.clear()

    def cache_stats(self) -> Dict[str, Any]:
        keys = self.cache.keys() if hasattr(self.cache, "keys") else []
        return {"entries": len(keys), "keys": keys}
