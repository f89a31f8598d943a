#!/usr/bin/env python3
"""
Headless-browser signup backend.

Each call owns its own Playwright driver, browser, context and page; nothing
is shared between concurrent calls and everything is closed before return.
"""

from typing import Any, Dict, Optional
import logging

from playwright.async_api import async_playwright, Error as PlaywrightError

from ..config import DEFAULT_USER_AGENT
from ..errors import ElementNotFound
from .selectors import (
    CONFIRMATION_CHAIN,
    EMAIL_INPUT_CHAIN,
    SIGNUP_FORM_CHAIN,
    SUBMIT_CHAIN,
)
from .types import AutomationResult, Framework

logger = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 30000
CONFIRMATION_TIMEOUT_MS = 10000

LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# Inside the located form, the first button is the last resort
FORM_SUBMIT_CHAIN = SUBMIT_CHAIN.with_fallback("button")


def _looks_like_confirmation(response) -> bool:
    url = response.url
    return (
        "subscribe" in url
        or "newsletter" in url
        or "signup" in url
        or response.status == 200
    )


class PlaywrightFramework:
    """Newsletter signup through a local headless Chromium"""

    name = Framework.PLAYWRIGHT.display_name

    def __init__(self, headless: bool = True, user_agent: str = DEFAULT_USER_AGENT):
        self.headless = headless
        self.user_agent = user_agent

    async def sign_up(self, url: str, email: str) -> AutomationResult:
        details = {"url": url, "email": email, "framework": self.name}
        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
                context = None
                try:
                    context = await browser.new_context(user_agent=self.user_agent)
                    page = await context.new_page()
                    outcome = await self.submit_signup(page, url, email)
                finally:
                    await self._close(context, browser)
        except ElementNotFound as e:
            logger.warning(f"Playwright signup stopped at {e.stage} for {url}: {e}")
            return AutomationResult.failure(e, **details)
        except Exception as e:
            logger.error(f"Playwright signup failed for {url}: {e}")
            return AutomationResult.failure(e, **details)

        details.update(outcome)
        return AutomationResult(success=True, details=details)

    async def submit_signup(self, page, url: str, email: str) -> Dict[str, Any]:
        """
        Drive an open page through the signup form.

        Returns:
            Diagnostic fields for the result details

        Raises:
            ElementNotFound: when the form, email field or submit control is missing
        """
        logger.info(f"Navigating to {url}")
        await page.goto(url, wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)

        form = await SIGNUP_FORM_CHAIN.first_match(page.query_selector)
        if not form:
            raise ElementNotFound("form", "No newsletter signup form found on the page")

        email_input = await EMAIL_INPUT_CHAIN.first_match(form.value.query_selector)
        if not email_input:
            raise ElementNotFound("email", "No email input field found in the form")
        await email_input.value.fill(email)

        submit = await FORM_SUBMIT_CHAIN.first_match(form.value.query_selector)
        if not submit:
            raise ElementNotFound("submit", "No submit button found in the form")

        logger.info(f"Submitting form {form.selector!r} via {submit.selector!r}")
        await submit.value.click()

        try:
            await page.wait_for_event(
                "response",
                predicate=_looks_like_confirmation,
                timeout=CONFIRMATION_TIMEOUT_MS,
            )
        except PlaywrightError as e:
            # Timeouts included; the form was already submitted
            logger.debug(f"No confirmation response within {CONFIRMATION_TIMEOUT_MS}ms: {e}")

        confirmation = await CONFIRMATION_CHAIN.first_match(page.query_selector)
        return {
            "form_selector": form.selector,
            "email_selector": email_input.selector,
            "submit_selector": submit.selector,
            "confirmation_detected": confirmation is not None,
            "confirmation_selector": confirmation.selector if confirmation else None,
        }

    async def _close(self, context: Optional[Any], browser: Any) -> None:
        if context is not None:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Failed to close browser context: {e}")
        try:
            await browser.close()
        except Exception as e:
            logger.warning(f"Failed to close browser: {e}")
