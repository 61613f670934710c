from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from booking_engine.application.exceptions import EventDeliveryError
from booking_engine.infrastructure.notifications.signing import sign_payload


class WebhookClient:
    def __init__(self, endpoint: str, secret: str | None = None, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._endpoint = endpoint
        self._secret = secret
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def post_event(self, payload: dict[str, Any]) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._secret:
            headers["X-Signature-256"] = sign_payload(body, self._secret)

        try:
            resp = self._client.post(self._endpoint, content=body, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error(
                "Webhook delivery failed",
                extra={"event_type": payload.get("event_type"), "reason": str(e)},
            )
            raise EventDeliveryError(str(e)) from e

        if resp.status_code >= 400:
            self._logger.error(
                "Webhook rejected event",
                extra={
                    "event_type": payload.get("event_type"),
                    "status": resp.status_code,
                    "reason": resp.text[:200],
                },
            )
            raise EventDeliveryError(f"webhook responded {resp.status_code}")
