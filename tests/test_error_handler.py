"""
Unit tests for the user-friendly error handler.

Tests error mapping and formatting for the CLI and result details.
"""

import pytest
from newsletter_core.error_handler import (
    describe_error,
    get_error_category,
    should_retry_error,
    format_error_for_logging,
    create_error_response
)
from newsletter_core.errors import (
    AutomationTimeout,
    ConfigurationError,
    ElementNotFound,
    NetworkError,
    ParseError,
    RemoteAPIError,
)


def test_configuration_error():
    """Missing credentials are critical and not retryable."""
    result = describe_error(ConfigurationError("Skyvern API key not configured"))

    assert result["category"] == "configuration"
    assert result["severity"] == "critical"
    assert result["can_retry"] is False
    assert result["technical"] == "Skyvern API key not configured"


def test_element_not_found():
    """Missing form elements point at the page, not the network."""
    error = ElementNotFound("email", "No email input field found in the form")

    assert get_error_category(error) == "form"
    assert should_retry_error(error) is False


@pytest.mark.parametrize("error,category", [
    (RemoteAPIError("Skyvern API error: bad", status=400), "remote_api"),
    (NetworkError("connection reset"), "network"),
    (AutomationTimeout("Task timed out"), "timeout"),
    (ParseError("not JSON"), "parse"),
])
def test_package_error_categories(error, category):
    assert get_error_category(error) == category


def test_playwright_navigation_error_pattern():
    """Third-party errors are matched by message."""
    error = RuntimeError("Page.goto: net::ERR_CONNECTION_REFUSED at https://example.com")

    result = describe_error(error)

    assert result["category"] == "network"
    assert result["can_retry"] is True


def test_missing_browser_pattern():
    error = RuntimeError("BrowserType.launch: Executable doesn't exist at /ms-playwright/chromium")

    result = describe_error(error)

    assert result["category"] == "browser"
    assert "playwright install" in result["suggestion"]
    assert result["can_retry"] is False


def test_unknown_error():
    """Unknown errors fall back to a generic message."""
    result = describe_error(RuntimeError("Some random error"))

    assert result["category"] == "unknown"
    assert result["severity"] == "error"
    assert result["can_retry"] is True


def test_technical_details_override():
    result = describe_error(NetworkError("boom"), technical_details="POST /v1/tasks")

    assert result["technical"] == "POST /v1/tasks"


def test_format_for_logging():
    """Test logging format."""
    error = RemoteAPIError("Failed to create session: Invalid API key", status=401)

    formatted = format_error_for_logging(error, context="browserbase signup")

    assert formatted.startswith("Context: browserbase signup")
    assert "Suggestion:" in formatted
    assert "Technical: Failed to create session: Invalid API key" in formatted


def test_create_error_response():
    """Test CLI error response creation."""
    response = create_error_response(ConfigurationError("missing"))

    assert response["success"] is False
    assert response["error"]["category"] == "configuration"
    assert "stacktrace" not in response["error"]


def test_create_error_response_with_stacktrace():
    try:
        raise NetworkError("connection reset")
    except NetworkError as e:
        response = create_error_response(e, include_stacktrace=True)

    assert "NetworkError" in response["error"]["stacktrace"]
    assert response["error"]["technical_details"] == "connection reset"
