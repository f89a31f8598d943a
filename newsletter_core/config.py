#!/usr/bin/env python3
from dataclasses import dataclass
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ["true", "1", "yes"]


@dataclass
class Config:
    """Application configuration"""
    # Remote browser sessions
    browserbase_api_key: Optional[str] = None
    browserbase_base_url: str = "https://api.browserbase.com"
    browserbase_project_id: Optional[str] = None

    # AI task queue
    skyvern_api_key: Optional[str] = None
    skyvern_base_url: str = "https://api.skyvern.com"

    # Semantic link extraction
    link_llm_provider: str = "openai/gpt-3.5-turbo"
    link_llm_token: Optional[str] = None

    # Local headless browser
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    email_domain: str = "newsletter-automation.com"
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'Config':
        """Create config from environment variables"""
        return cls(
            browserbase_api_key=os.getenv("BROWSERBASE_API_KEY") or None,
            browserbase_base_url=os.getenv("BROWSERBASE_BASE_URL", "https://api.browserbase.com"),
            browserbase_project_id=os.getenv("BROWSERBASE_PROJECT_ID") or None,
            skyvern_api_key=os.getenv("SKYVERN_API_KEY") or None,
            skyvern_base_url=os.getenv("SKYVERN_BASE_URL", "https://api.skyvern.com"),
            link_llm_provider=os.getenv("NEWSLETTER_LINK_LLM_PROVIDER", "openai/gpt-3.5-turbo"),
            link_llm_token=os.getenv("NEWSLETTER_LINK_LLM_TOKEN") or None,
            headless=_env_flag("NEWSLETTER_HEADLESS", "true"),
            user_agent=os.getenv("NEWSLETTER_USER_AGENT", DEFAULT_USER_AGENT),
            email_domain=os.getenv("EMAIL_DOMAIN", "newsletter-automation.com"),
            debug=_env_flag("NEWSLETTER_DEBUG", "false"),
            log_level=os.getenv("NEWSLETTER_LOG_LEVEL", "INFO"),
        )


# Process default, read once at import
config = Config.from_env()
