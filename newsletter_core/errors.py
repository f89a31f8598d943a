"""
Error taxonomy shared by the automation backends and the link extractor.

Every error here is caught at a component boundary and turned into a
structured result; none of them is meant to reach the caller.
"""

from typing import Optional


class NewsletterCoreError(Exception):
    """Base class for all newsletter_core errors"""
    pass


class ConfigurationError(NewsletterCoreError):
    """A required credential or setting is missing"""
    pass


class ElementNotFound(NewsletterCoreError):
    """No candidate in a selector chain matched"""

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage


class NetworkError(NewsletterCoreError):
    """Transport failure talking to a remote API (timeout, connection refused, etc.)"""
    pass


class RemoteAPIError(NewsletterCoreError):
    """Remote API answered with a non-2xx status"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AutomationTimeout(NewsletterCoreError):
    """A bounded wait was exceeded"""
    pass


class ParseError(NewsletterCoreError):
    """Content could not be parsed (HTML or model output)"""
    pass


class InvalidTaskTransition(NewsletterCoreError):
    """Illegal state change of a remote AI task"""
    pass
