#!/usr/bin/env python3
"""
AI-task signup backend.

Submits a declarative task (target URL plus fill/click actions expressed as
selector candidates) to a remote task queue, then polls until the task
reaches a terminal status or the attempt ceiling is hit.

    SUBMITTED -> POLLING -> {COMPLETED | FAILED | TIMED_OUT}
"""

import asyncio
from typing import Any, Callable, Dict, Optional
import logging

from ..errors import AutomationTimeout, ConfigurationError, RemoteAPIError
from .http import JsonApiClient
from .selectors import EMAIL_INPUT_CHAIN, SUBMIT_CHAIN
from .types import AutomationResult, Framework, RemoteTask, TaskPhase

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 10
MAX_POLL_ATTEMPTS = 30  # 5 minutes


def build_task_payload(url: str, email: str) -> Dict[str, Any]:
    """Task description for a newsletter signup"""
    return {
        "url": url,
        "navigation_payload": {
            "actions": [
                {
                    "action_type": "fill",
                    "input": email,
                    "associated_selectors": list(EMAIL_INPUT_CHAIN),
                },
                {
                    "action_type": "click",
                    "associated_selectors": list(SUBMIT_CHAIN),
                },
            ],
        },
        "extracted_information_schema": {
            "type": "object",
            "properties": {
                "success": {
                    "type": "boolean",
                    "description": "Whether the newsletter signup was successful",
                },
                "message": {
                    "type": "string",
                    "description": "Success or error message from the signup process",
                },
            },
        },
    }


class SkyvernFramework:
    """Newsletter signup through an AI browser-task API"""

    name = Framework.SKYVERN.display_name

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.skyvern.com",
        client_factory: Optional[Callable[[], JsonApiClient]] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> JsonApiClient:
        return JsonApiClient(self.base_url, self.api_key)

    async def sign_up(self, url: str, email: str) -> AutomationResult:
        details: Dict[str, Any] = {"url": url, "email": email, "framework": self.name}
        task: Optional[RemoteTask] = None
        try:
            if not self.api_key:
                raise ConfigurationError("Skyvern API key not configured")
            async with self._client_factory() as client:
                task = await self._submit(client, url, email)
                details["taskId"] = task.task_id
                await self._poll(client, task)
        except Exception as e:
            logger.error(f"Skyvern signup failed for {url}: {e}")
            if task is not None:
                task.fail(str(e) or type(e).__name__)
                details.update({"taskId": task.task_id, "phase": task.phase.value, "polls": task.polls})
            return AutomationResult.failure(e, **details)

        details.update({"phase": task.phase.value, "polls": task.polls})
        if task.phase == TaskPhase.COMPLETED:
            info = task.extracted_info or {}
            details["extractedInfo"] = task.extracted_info
            return AutomationResult(success=bool(info.get("success")), details=details)

        reason = task.failure_reason or "Unknown error"
        details["error_category"] = "remote_api"
        return AutomationResult(success=False, error=f"Task failed: {reason}", details=details)

    async def _submit(self, client: JsonApiClient, url: str, email: str) -> RemoteTask:
        resp = await client.request("POST", "/v1/tasks", build_task_payload(url, email))
        if not resp.ok:
            raise RemoteAPIError(f"Skyvern API error: {resp.message}", resp.status)
        task_id = resp.data.get("task_id")
        if not task_id:
            raise RemoteAPIError("Skyvern API error: response has no task_id", resp.status)
        task = RemoteTask(task_id=str(task_id))
        logger.info(f"Submitted signup task {task.task_id} for {url}")
        return task

    async def _poll(self, client: JsonApiClient, task: RemoteTask) -> None:
        """
        Poll the task until it finishes.

        Raises:
            RemoteAPIError: when a status check is rejected
            AutomationTimeout: when MAX_POLL_ATTEMPTS is exhausted
        """
        for _ in range(MAX_POLL_ATTEMPTS):
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

            resp = await client.request("GET", f"/v1/tasks/{task.task_id}")
            if not resp.ok:
                task.fail("Failed to check task status")
                raise RemoteAPIError("Failed to check task status", resp.status)

            task.record_poll(resp.data)
            logger.debug(f"Task {task.task_id} poll {task.polls}: {task.status.value}")
            if task.is_finished:
                return

        task.advance(TaskPhase.TIMED_OUT)
        raise AutomationTimeout("Task timed out")
