"""
User-Friendly Error Handler.

Converts errors raised during signup automation or link extraction into
helpful messages with actionable suggestions.
"""

import asyncio
from typing import Dict, Optional
import logging

from .errors import (
    AutomationTimeout,
    ConfigurationError,
    ElementNotFound,
    InvalidTaskTransition,
    NetworkError,
    ParseError,
    RemoteAPIError,
)

logger = logging.getLogger(__name__)


# Error class -> user-friendly info. Checked in order; first isinstance wins.
ERROR_CLASS_MAPPINGS = [
    (ConfigurationError, {
        "message": "A required credential is not configured",
        "suggestion": "Set the API key for this framework in the environment or .env file",
        "severity": "critical",
        "can_retry": False,
        "category": "configuration",
    }),
    (ElementNotFound, {
        "message": "The signup form could not be operated",
        "suggestion": "Check that the URL points to a page with a newsletter form",
        "severity": "error",
        "can_retry": False,
        "category": "form",
    }),
    (RemoteAPIError, {
        "message": "The automation service rejected the request",
        "suggestion": "Check the API key and the service status, then retry",
        "severity": "error",
        "can_retry": True,
        "category": "remote_api",
    }),
    (NetworkError, {
        "message": "Network error while talking to a remote service",
        "suggestion": "Check the internet connection and retry",
        "severity": "error",
        "can_retry": True,
        "category": "network",
    }),
    (AutomationTimeout, {
        "message": "The operation took too long",
        "suggestion": "The site or service may be slow; retry later",
        "severity": "warning",
        "can_retry": True,
        "category": "timeout",
    }),
    (asyncio.TimeoutError, {
        "message": "The operation took too long",
        "suggestion": "The site or service may be slow; retry later",
        "severity": "warning",
        "can_retry": True,
        "category": "timeout",
    }),
    (ParseError, {
        "message": "Content could not be parsed",
        "suggestion": "The content is malformed; only partial results are available",
        "severity": "warning",
        "can_retry": False,
        "category": "parse",
    }),
    (InvalidTaskTransition, {
        "message": "The remote task reported an inconsistent state",
        "suggestion": "Retry the signup; report the task id if it persists",
        "severity": "error",
        "can_retry": True,
        "category": "remote_api",
    }),
]

# Fallback pattern matching for third-party exceptions (e.g. Playwright errors)
ERROR_MAPPINGS = {
    "timeout": {
        "message": "The page took too long to respond",
        "suggestion": "Check that the site is reachable and retry",
        "severity": "warning",
        "can_retry": True,
        "category": "timeout",
    },
    "net::": {
        "message": "The page could not be loaded",
        "suggestion": "Check that the URL is correct and the site is reachable",
        "severity": "error",
        "can_retry": True,
        "category": "network",
    },
    "connection refused": {
        "message": "Could not connect to the site",
        "suggestion": "Check that the URL is correct and the site is reachable",
        "severity": "error",
        "can_retry": True,
        "category": "network",
    },
    "target closed": {
        "message": "The browser closed during the operation",
        "suggestion": "Run the signup again",
        "severity": "error",
        "can_retry": True,
        "category": "browser",
    },
    "executable doesn't exist": {
        "message": "The browser is not installed",
        "suggestion": "Install it with: playwright install chromium",
        "severity": "critical",
        "can_retry": False,
        "category": "browser",
    },
}


def describe_error(
    error: Exception,
    technical_details: Optional[str] = None
) -> Dict:
    """
    Convert an error to a user-friendly description.

    Returns:
        {
            "message": str,
            "suggestion": str,
            "technical": str,
            "severity": str,         # "critical", "error", "warning"
            "can_retry": bool,
            "category": str,
        }
    """
    error_str = str(error)

    for error_class, friendly_error in ERROR_CLASS_MAPPINGS:
        if isinstance(error, error_class):
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            return result

    for pattern, friendly_error in ERROR_MAPPINGS.items():
        if pattern in error_str.lower():
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            logger.debug(f"Mapped error to user-friendly: {result['message']}")
            return result

    return {
        "message": "An unexpected error occurred",
        "suggestion": "Check the logs or try again",
        "technical": technical_details or error_str,
        "severity": "error",
        "can_retry": True,
        "category": "unknown",
    }


def get_error_category(error: Exception) -> str:
    """
    Categorize error type.

    Returns:
        Category name: "configuration", "form", "remote_api", "network",
        "timeout", "parse", "browser" or "unknown"
    """
    return describe_error(error)["category"]


def should_retry_error(error: Exception) -> bool:
    """Determine if error suggests a retry might help."""
    return describe_error(error).get("can_retry", False)


def format_error_for_logging(error: Exception, context: str = "") -> str:
    """Format error for structured logging."""
    friendly = describe_error(error)

    lines = [
        f"{friendly['message']}",
        f"Suggestion: {friendly['suggestion']}",
        f"Technical: {friendly['technical']}"
    ]

    if context:
        lines.insert(0, f"Context: {context}")

    return "\n".join(lines)


def create_error_response(
    error: Exception,
    include_stacktrace: bool = False
) -> Dict:
    """
    Create standardized error response for the CLI.
    """
    import traceback

    friendly = describe_error(error)

    response = {
        "success": False,
        "error": {
            "message": friendly["message"],
            "suggestion": friendly["suggestion"],
            "severity": friendly["severity"],
            "can_retry": friendly["can_retry"],
            "category": friendly["category"],
        }
    }

    if include_stacktrace:
        response["error"]["stacktrace"] = traceback.format_exc()
        response["error"]["technical_details"] = friendly["technical"]

    return response
