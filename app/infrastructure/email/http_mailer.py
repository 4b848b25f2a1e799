from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from app.domain.ports.email_port import EmailPort


class HttpMailRelay(EmailPort):
    """Delivers mail by POSTing JSON to an HTTP relay in front of the SMTP server."""

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        html: str | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        headers: Dict[str, str] = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        payload: Dict[str, Any] = {"to": to, "subject": subject, "body": body}
        if html is not None:
            payload["html"] = html

        url = f"{self._base_url}{self._send_path}"
        try:
            resp = await self._client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise RuntimeError(f"mail relay HTTP error: {e}") from e
        if not resp.is_success:
            raise RuntimeError(f"mail relay responded {resp.status_code}: {resp.text[:200]}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
