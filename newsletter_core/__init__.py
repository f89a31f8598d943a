"""
newsletter_core package: newsletter signup automation and email link extraction

Usage:
    from newsletter_core import create_framework, LinkExtractor

    result = await create_framework("playwright").sign_up(url, email)
    links = await LinkExtractor().extract_links(email_html)
"""
from .config import Config, config
from .email_service import EmailService
from .llm_config import LLMConfig
from .llm_factory import create_llm_client
from .automation import (
    AutomationResult,
    Framework,
    compare_frameworks,
    create_framework,
    sign_up,
)
from .links import ExtractedLink, LinkExtractor, LinkType, extract_links

__all__ = [
    "Config",
    "config",
    "EmailService",
    "LLMConfig",
    "create_llm_client",
    # Automation
    "AutomationResult",
    "Framework",
    "compare_frameworks",
    "create_framework",
    "sign_up",
    # Links
    "ExtractedLink",
    "LinkExtractor",
    "LinkType",
    "extract_links",
]

__version__ = '1.0.0'
