"""HTTP client for the push delivery service."""

from dataclasses import asdict, dataclass

import httpx

from smart_pantry.domain.errors import ExternalServiceError
from smart_pantry.domain.notifications import PushPayload
from smart_pantry.services.notifications import PushClient

DEFAULT_ICON = "/icons/icon-192x192.png"
DEFAULT_BADGE = "/icons/badge-72x72.png"


@dataclass
class HttpxPushClient(PushClient):
    """Push client that forwards payloads to a delivery service over HTTP."""

    base_url: str
    token: str | None
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, token: str | None = None) -> "HttpxPushClient":
        """Create a push client with a managed httpx session."""
        return cls(base_url=base_url, token=token, http_client=httpx.AsyncClient())

    async def send(self, payload: PushPayload) -> None:
        """POST a notification to the delivery service."""
        body = asdict(payload)
        body["user_id"] = str(payload.user_id)
        body["icon"] = DEFAULT_ICON
        body["badge"] = DEFAULT_BADGE
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = await self.http_client.post(
                f"{self.base_url.rstrip('/')}/notifications",
                json=body,
                headers=headers,
                timeout=10,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Push delivery failed: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
