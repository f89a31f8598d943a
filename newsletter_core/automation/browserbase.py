#!/usr/bin/env python3
"""
Remote-session signup backend.

Drives a hosted browser session through discrete navigate/fill/click/evaluate
API calls. The remote API offers no load or idle signal, so fixed settle
delays follow navigation and submission.
"""

import asyncio
from typing import Callable, Optional
import logging

from ..errors import ConfigurationError, ElementNotFound, RemoteAPIError
from .http import JsonApiClient
from .selectors import EMAIL_INPUT_CHAIN, SUBMIT_CHAIN, confirmation_expression
from .types import AutomationResult, Framework

logger = logging.getLogger(__name__)

NAVIGATION_SETTLE_SECONDS = 3
SUBMIT_SETTLE_SECONDS = 5


class BrowserbaseFramework:
    """Newsletter signup through a remote browser session API"""

    name = Framework.BROWSERBASE.display_name

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.browserbase.com",
        project_id: Optional[str] = None,
        client_factory: Optional[Callable[[], JsonApiClient]] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.project_id = project_id
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> JsonApiClient:
        return JsonApiClient(self.base_url, self.api_key)

    async def sign_up(self, url: str, email: str) -> AutomationResult:
        details = {"url": url, "email": email, "framework": self.name}
        try:
            if not self.api_key:
                raise ConfigurationError("Browserbase API key not configured")
            async with self._client_factory() as client:
                outcome = await self._run_session(client, url, email, details)
        except ElementNotFound as e:
            logger.warning(f"Browserbase signup stopped at {e.stage} for {url}: {e}")
            return AutomationResult.failure(e, **details)
        except Exception as e:
            logger.error(f"Browserbase signup failed for {url}: {e}")
            return AutomationResult.failure(e, **details)

        details.update(outcome)
        return AutomationResult(success=True, details=details)

    async def _run_session(self, client: JsonApiClient, url: str, email: str, details: dict) -> dict:
        created = await client.request("POST", "/v1/sessions", {"projectId": self.project_id})
        if not created.ok:
            raise RemoteAPIError(f"Failed to create session: {created.message}", created.status)

        session_id = created.data.get("id")
        if not session_id:
            raise RemoteAPIError("Failed to create session: response has no session id", created.status)
        details["sessionId"] = session_id
        logger.info(f"Opened remote session {session_id} for {url}")
        try:
            return await self._drive(client, session_id, url, email)
        finally:
            await self._delete_session(client, session_id)

    async def _drive(self, client: JsonApiClient, session_id: str, url: str, email: str) -> dict:
        base = f"/v1/sessions/{session_id}"

        navigated = await client.request("POST", f"{base}/navigate", {"url": url})
        if not navigated.ok:
            raise RemoteAPIError(f"Navigation failed: {navigated.message}", navigated.status)
        await asyncio.sleep(NAVIGATION_SETTLE_SECONDS)

        async def fill(selector: str) -> bool:
            resp = await client.request("POST", f"{base}/fill", {"selector": selector, "value": email})
            return resp.ok

        async def click(selector: str) -> bool:
            resp = await client.request("POST", f"{base}/click", {"selector": selector})
            return resp.ok

        email_match = await EMAIL_INPUT_CHAIN.first_match(fill)
        if not email_match:
            raise ElementNotFound("email", "Could not find or fill email input field")

        submit_match = await SUBMIT_CHAIN.first_match(click)
        if not submit_match:
            raise ElementNotFound("submit", "Could not find or click submit button")

        await asyncio.sleep(SUBMIT_SETTLE_SECONDS)

        evaluated = await client.request("POST", f"{base}/evaluate", {"expression": confirmation_expression()})
        confirmed = bool(evaluated.ok and evaluated.data.get("result"))
        return {
            "email_selector": email_match.selector,
            "submit_selector": submit_match.selector,
            "confirmation_detected": confirmed,
        }

    async def _delete_session(self, client: JsonApiClient, session_id: str) -> None:
        try:
            resp = await client.request("DELETE", f"/v1/sessions/{session_id}")
            if not resp.ok:
                logger.warning(f"Session {session_id} cleanup returned {resp.status}")
        except Exception as e:
            logger.warning(f"Session {session_id} cleanup failed: {e}")
