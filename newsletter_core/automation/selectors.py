"""
Signup Selectors - Centralized selector chains for newsletter forms

No canonical signup markup exists across sites, so every element is located
through an ordered chain of candidate selectors; the first candidate that a
probe accepts wins. The same combinator serves form, email field, submit
button and confirmation lookups for every backend.

Usage:
    from newsletter_core.automation.selectors import EMAIL_INPUT_CHAIN

    match = await EMAIL_INPUT_CHAIN.first_match(form.query_selector)
    if match:
        await match.value.fill(email)
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


Probe = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class SelectorMatch:
    """A selector that matched and whatever the probe returned for it"""
    selector: str
    value: Any


@dataclass(frozen=True)
class SelectorChain:
    """Ordered candidate selectors, tried in priority order"""
    name: str
    selectors: Tuple[str, ...]

    def __iter__(self) -> Iterator[str]:
        return iter(self.selectors)

    def __len__(self) -> int:
        return len(self.selectors)

    def with_fallback(self, *selectors: str) -> 'SelectorChain':
        """Return a new chain with extra last-resort candidates appended."""
        return SelectorChain(self.name, self.selectors + tuple(selectors))

    async def first_match(self, probe: Probe) -> Optional[SelectorMatch]:
        """
        Try each selector with ``probe`` until one yields a truthy value.

        A probe that raises counts as a miss for that selector.

        Returns:
            SelectorMatch for the first hit, or None when the chain is exhausted
        """
        for selector in self.selectors:
            try:
                value = await probe(selector)
            except Exception as e:
                logger.debug(f"[{self.name}] selector {selector!r} failed: {e}")
                continue
            if value:
                logger.debug(f"[{self.name}] matched selector: {selector}")
                return SelectorMatch(selector=selector, value=value)
        logger.debug(f"[{self.name}] no selector matched ({len(self.selectors)} tried)")
        return None


# =============================================================================
# FORM SELECTORS
# =============================================================================

SIGNUP_FORM_CHAIN = SelectorChain("signup form", (
    'form[action*="subscribe"]',
    'form[action*="newsletter"]',
    'form[action*="signup"]',
    'form[action*="join"]',
    'form[action*="register"]',
    'form[class*="newsletter"]',
    'form[class*="subscribe"]',
    'form[id*="newsletter"]',
    'form[id*="subscribe"]',
    # Any form that holds an email field
    'form:has(input[type="email"])',
))

EMAIL_INPUT_CHAIN = SelectorChain("email input", (
    'input[type="email"]',
    'input[name*="email"]',
    'input[id*="email"]',
    'input[placeholder*="email" i]',
    'input[placeholder*="newsletter" i]',
    'input[placeholder*="subscribe" i]',
))


# =============================================================================
# BUTTON SELECTORS
# =============================================================================

SUBMIT_CHAIN = SelectorChain("submit button", (
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Subscribe")',
    'button:has-text("Sign Up")',
    'button:has-text("Join")',
    'button:has-text("Register")',
    'button[class*="submit"]',
    'button[id*="submit"]',
))


# =============================================================================
# CONFIRMATION SELECTORS
# =============================================================================

CONFIRMATION_TEXTS = ("Thank you", "Success", "Subscribed", "Welcome", "Confirmed")

CONFIRMATION_CHAIN = SelectorChain(
    "confirmation",
    tuple(f':has-text("{text}")' for text in CONFIRMATION_TEXTS) + (
        '[class*="success"]',
        '[class*="thank"]',
    ),
)


def confirmation_expression(texts: Tuple[str, ...] = CONFIRMATION_TEXTS) -> str:
    """JS expression that is true when the page body shows any confirmation text."""
    checks = [f"document.body.innerText.includes({text!r})" for text in texts]
    return " ||\n".join(checks)


__all__ = [
    'SelectorMatch', 'SelectorChain',
    'SIGNUP_FORM_CHAIN', 'EMAIL_INPUT_CHAIN', 'SUBMIT_CHAIN',
    'CONFIRMATION_TEXTS', 'CONFIRMATION_CHAIN', 'confirmation_expression',
]
