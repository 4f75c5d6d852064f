"""
AI event client — the "create event" API that fronts the completion service.

``create_event("chatgpt_request", {"prompt": ..., "response_type": "json"})``
returns the decoded JSON document the service produced.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from riskassess.config import settings

logger = logging.getLogger(__name__)


class EventClient:
    def __init__(
        self,
        url: str = settings.ZAPT_EVENTS_URL,
        app_id: str = settings.ZAPT_APP_ID,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.app_id = app_id
        self.http = http or httpx.AsyncClient()

    async def create_event(
        self,
        event_type: str,
        data: Dict[str, Any],
        access_token: Optional[str] = None,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        logger.debug(f"Creating event {event_type}")
        resp = await self.http.post(
            self.url,
            headers=headers,
            json={"app_id": self.app_id, "type": event_type, "data": data},
        )
        resp.raise_for_status()
        return resp.json()
