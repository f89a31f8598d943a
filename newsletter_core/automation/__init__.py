"""
Automation Engine - newsletter signup across interchangeable backends

Usage:
    from newsletter_core.automation import create_framework

    framework = create_framework("playwright")
    result = await framework.sign_up("https://example.com", "someone@example.com")
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union
import logging

from ..config import Config
from ..config import config as default_config
from .browserbase import BrowserbaseFramework
from .playwright_framework import PlaywrightFramework
from .selectors import SelectorChain, SelectorMatch
from .skyvern import SkyvernFramework
from .types import AutomationResult, Framework, RemoteTask, TaskPhase, TaskStatus

logger = logging.getLogger(__name__)


class AutomationFramework(Protocol):
    name: str

    async def sign_up(self, url: str, email: str) -> AutomationResult:
        ...


def create_framework(
    name: Union[str, Framework],
    config: Optional[Config] = None,
) -> AutomationFramework:
    """
    Build a signup backend by name.

    Each backend only receives the settings it needs.

    Raises:
        ValueError: for an unknown backend name
    """
    cfg = config or default_config
    try:
        framework = Framework(str(getattr(name, "value", name)).lower())
    except ValueError:
        raise ValueError(
            f"Unknown framework: {name}. Available: {', '.join(f.value for f in Framework)}"
        ) from None

    if framework == Framework.PLAYWRIGHT:
        return PlaywrightFramework(headless=cfg.headless, user_agent=cfg.user_agent)
    elif framework == Framework.BROWSERBASE:
        return BrowserbaseFramework(
            api_key=cfg.browserbase_api_key,
            base_url=cfg.browserbase_base_url,
            project_id=cfg.browserbase_project_id,
        )
    elif framework == Framework.SKYVERN:
        return SkyvernFramework(api_key=cfg.skyvern_api_key, base_url=cfg.skyvern_base_url)
    raise ValueError(f"Unhandled framework: {framework}")


async def sign_up(
    url: str,
    email: str,
    framework: Union[str, Framework] = Framework.PLAYWRIGHT,
    config: Optional[Config] = None,
) -> AutomationResult:
    """Run one signup with the selected backend."""
    return await create_framework(framework, config).sign_up(url, email)


@dataclass
class FrameworkRun:
    """One backend's outcome in a comparison"""
    framework: str
    success: bool
    duration: int  # milliseconds
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = {"framework": self.framework, "success": self.success, "duration": self.duration}
        if self.error is not None:
            data["error"] = self.error
        if self.details:
            data["details"] = self.details
        return data


@dataclass
class FrameworkComparison:
    """Side-by-side outcome of every backend for one URL"""
    results: List[FrameworkRun]
    statistics: Dict[str, Any]
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "testResults": [r.to_dict() for r in self.results],
            "statistics": self.statistics,
            "recommendations": self.recommendations,
        }


async def _timed_run(framework: AutomationFramework, url: str, email: str) -> FrameworkRun:
    logger.info(f"Testing {framework.name} framework with URL: {url}")
    start = time.monotonic()
    try:
        result = await framework.sign_up(url, email)
    except Exception as e:
        logger.error(f"{framework.name} raised past its boundary: {e}")
        result = AutomationResult.failure(e)
    duration = int((time.monotonic() - start) * 1000)
    logger.info(f"{framework.name} test completed in {duration}ms: success={result.success}")
    return FrameworkRun(
        framework=framework.name,
        success=result.success,
        duration=duration,
        error=result.error,
        details=dict(result.details),
    )


def _statistics(runs: List[FrameworkRun]) -> Dict[str, Any]:
    total = len(runs)
    successful = sum(1 for r in runs if r.success)
    fastest = min(runs, key=lambda r: r.duration) if runs else None
    return {
        "totalTests": total,
        "successfulTests": successful,
        "successRate": (successful / total) * 100 if total else 0.0,
        "averageDuration": round(sum(r.duration for r in runs) / total) if total else 0,
        "fastestFramework": fastest.framework if fastest else None,
    }


def generate_recommendations(runs: List[FrameworkRun]) -> List[str]:
    recommendations: List[str] = []
    successful = [r for r in runs if r.success]

    if not successful:
        recommendations.append("No frameworks succeeded. Check URL and form availability.")
    elif len(successful) == 1:
        recommendations.append(
            f"Only {successful[0].framework} succeeded. Use this framework for this site."
        )
    else:
        fastest = min(successful, key=lambda r: r.duration)
        recommendations.append(
            f"Multiple frameworks succeeded. {fastest.framework} was fastest ({fastest.duration}ms)."
        )

    by_name = {r.framework: r for r in runs}
    playwright = by_name.get(Framework.PLAYWRIGHT.display_name)
    skyvern = by_name.get(Framework.SKYVERN.display_name)
    browserbase = by_name.get(Framework.BROWSERBASE.display_name)

    if playwright and playwright.success and not (skyvern and skyvern.success):
        recommendations.append("Playwright succeeded where Skyvern failed. This site may have simple forms.")
    if skyvern and skyvern.success and not (playwright and playwright.success):
        recommendations.append(
            "Skyvern succeeded where Playwright failed. This site may have complex or dynamic forms."
        )
    if browserbase and browserbase.success and not (playwright and playwright.success):
        recommendations.append(
            "Browserbase succeeded where Playwright failed. This site may require cloud-based automation."
        )
    return recommendations


async def compare_frameworks(
    url: str,
    email: str,
    frameworks: Optional[Sequence[AutomationFramework]] = None,
    config: Optional[Config] = None,
) -> FrameworkComparison:
    """Run every backend concurrently against the same URL and address."""
    if frameworks is None:
        frameworks = [create_framework(f, config) for f in Framework]
    runs = await asyncio.gather(*(_timed_run(f, url, email) for f in frameworks))
    runs = list(runs)
    return FrameworkComparison(
        results=runs,
        statistics=_statistics(runs),
        recommendations=generate_recommendations(runs),
    )


__all__ = [
    'AutomationFramework', 'AutomationResult', 'Framework', 'RemoteTask',
    'TaskPhase', 'TaskStatus', 'SelectorChain', 'SelectorMatch',
    'PlaywrightFramework', 'BrowserbaseFramework', 'SkyvernFramework',
    'create_framework', 'sign_up', 'FrameworkRun', 'FrameworkComparison',
    'compare_frameworks', 'generate_recommendations',
]
