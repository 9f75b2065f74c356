"""
HTTP client that sends accepted position samples to the team location API
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class LocationUploadError(Exception):
    """A sample could not be stored; status_code is None for transport failures"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class LocationUploader:
    """
    Posts samples to POST /team-locations as the authenticated team member.

    Args:
        base_url: API root, e.g. https://api.example.com
        token: Bearer token of the team member
        client: Optional preconfigured httpx.AsyncClient (owned by the caller)
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.base_url = base_url.rstrip("/")
        self.token = token

    async def upload(
        self, latitude: float, longitude: float, accuracy: Optional[float] = None
    ) -> dict:
        """Store one sample and return the stored row"""
        payload = {"latitude": latitude, "longitude": longitude}
        if accuracy is not None:
            payload["accuracy"] = accuracy

        try:
            response = await self.client.post(
                f"{self.base_url}/team-locations",
                json=payload,
                headers={"Authorization": f"Bearer {self.token}"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"⚠️ Location upload failed: {e}")
            raise LocationUploadError(f"Failed to update location: {e}") from e

        if response.is_success:
            return response.json().get("data", {})

        try:
            message = response.json().get("error", "Failed to update location")
        except ValueError:
            message = response.text or "Failed to update location"
        logger.warning(f"⚠️ Location upload rejected ({response.status_code}): {message}")
        raise LocationUploadError(message, status_code=response.status_code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
