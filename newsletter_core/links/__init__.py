"""
Link Extraction Engine

Usage:
    from newsletter_core.links import LinkExtractor

    links = await LinkExtractor().extract_links(email_html)
"""

from .types import NO_CONTEXT, NO_TEXT, ExtractedLink, LinkType
from .urls import (
    SOCIAL_DOMAINS,
    categorize_link,
    dedup_key,
    deduplicate_links,
    is_valid_url,
    normalize_url,
)
from .extractor import (
    LinkExtractor,
    extract_from_html,
    extract_links,
    extract_with_pattern,
    parse_llm_links,
)

__all__ = [
    'ExtractedLink', 'LinkType', 'NO_TEXT', 'NO_CONTEXT',
    'SOCIAL_DOMAINS', 'categorize_link', 'dedup_key', 'deduplicate_links',
    'is_valid_url', 'normalize_url',
    'LinkExtractor', 'extract_from_html', 'extract_links',
    'extract_with_pattern', 'parse_llm_links',
]
