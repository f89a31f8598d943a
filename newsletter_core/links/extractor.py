"""
Link Extractor - every hyperlink in email content of unknown structure

Three independent strategies always run over the same input and are merged:

1. pattern    - absolute-URL regex over the raw text
2. structural - anchor elements of the parsed HTML
3. semantic   - an LLM asked for a JSON list (optional, needs a credential)

The merged list is deduplicated by normalized URL, first record wins.
"""

import html
import json
import re
import logging
from typing import Any, List, Optional, Union

from bs4 import BeautifulSoup

from ..config import Config
from ..errors import ParseError
from ..llm_config import LLMConfig
from ..llm_factory import create_llm_client
from .types import NO_CONTEXT, NO_TEXT, ExtractedLink
from .urls import categorize_link, deduplicate_links, is_valid_url, normalize_url

logger = logging.getLogger(__name__)


URL_PATTERN = re.compile(r'https?://[^\s<>"{}|\\^`\[\]]+', re.IGNORECASE)
TRAILING_PUNCTUATION = ".,;:!?'"
CONTEXT_LINES = 2

_TAG = re.compile(r"<[^>]*>")
_OPEN_TAG_TAIL = re.compile(r"<[^>]*$")
_CLOSE_TAG_HEAD = re.compile(r"^[^<>]*>")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

SEMANTIC_CHAR_LIMIT = 4000

SYSTEM_PROMPT = (
    "You are a link extraction assistant. Extract all URLs from the given content "
    "and provide context. Return only valid JSON."
)

PROMPT_TEMPLATE = """Extract all links from this email content and provide context for each link.
Return the result as a JSON array with the following structure:
[
  {{
    "url": "https://example.com",
    "text": "Link text or description",
    "context": "Surrounding text that provides context",
    "type": "internal|external|social|unsubscribe"
  }}
]

Email content:
{content}
"""


def _strip_markup(fragment: str) -> str:
    text = html.unescape(_TAG.sub(" ", fragment))
    return " ".join(text.split())


def _trim_url(url: str) -> str:
    """Drop sentence punctuation and an unbalanced closing paren glued to a URL."""
    while url:
        if url[-1] in TRAILING_PUNCTUATION:
            url = url[:-1]
        elif url[-1] == ")" and url.count(")") > url.count("("):
            url = url[:-1]
        else:
            break
    return url


def extract_with_pattern(content: str) -> List[ExtractedLink]:
    """
    Extract absolute URLs from raw text.

    Text is what precedes the URL on its line, else what follows it.
    Context is the two lines before through the two lines after.
    """
    lines = content.split("\n")
    links = []
    for match in URL_PATTERN.finditer(content):
        raw = _trim_url(match.group(0))
        if not raw:
            continue
        url = html.unescape(raw)

        line_no = content.count("\n", 0, match.start())
        line_start = content.rfind("\n", 0, match.start()) + 1
        line = lines[line_no]
        col = match.start() - line_start

        before = line[:col]
        after = line[col + len(raw):]
        open_tag = _OPEN_TAG_TAIL.search(before)
        if open_tag:
            # URL sits inside a tag attribute
            before = before[:open_tag.start()]
            after = _CLOSE_TAG_HEAD.sub("", after)
        text = _strip_markup(before) or _strip_markup(after) or NO_TEXT

        window = lines[max(0, line_no - CONTEXT_LINES):line_no + CONTEXT_LINES + 1]
        context = _strip_markup(" ".join(window)) or NO_CONTEXT

        try:
            url = normalize_url(url)
        except ValueError:
            pass
        links.append(ExtractedLink(url=url, text=text, context=context, type=categorize_link(url)))
    return links


def extract_from_html(content: str) -> List[ExtractedLink]:
    """
    Extract links from anchor elements.

    Hrefs with a scheme are kept (mailto: and tel: included); relative hrefs
    are dropped. Context is the text of every element under the anchor's parent.
    """
    soup = BeautifulSoup(content, "html.parser")
    links = []
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        try:
            url = normalize_url(href)
        except ValueError:
            continue

        text = " ".join(anchor.get_text().split()) or NO_TEXT

        parent = anchor.parent
        siblings = parent.find_all(recursive=False) if parent is not None else []
        context = " ".join(" ".join(s.get_text().split()) for s in siblings).strip() or NO_CONTEXT

        links.append(ExtractedLink(url=url, text=text, context=context, type=categorize_link(url)))
    return links


def parse_llm_links(response_text: str) -> List[ExtractedLink]:
    """
    Parse the model's JSON array into links.

    Entries without a usable URL are dropped; the model's own
    "type" is ignored in favour of categorize_link.

    Raises:
        ParseError: if the text is not a JSON array
    """
    text = _CODE_FENCE.sub("", (response_text or "").strip())
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ParseError(f"Model output is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise ParseError(f"Model output is a {type(data).__name__}, expected a list")

    links = []
    for item in data:
        if not isinstance(item, dict) or not isinstance(item.get("url"), str):
            continue
        try:
            url = normalize_url(item["url"])
        except ValueError:
            continue
        links.append(ExtractedLink(
            url=url,
            text=str(item.get("text") or "").strip() or NO_TEXT,
            context=str(item.get("context") or "").strip() or NO_CONTEXT,
            type=categorize_link(url),
        ))
    return links


class LinkExtractor:
    """Multi-strategy link extraction for email content"""

    def __init__(self, llm: Optional[Any] = None):
        """
        Args:
            llm: client with ``await ainvoke(prompt, system=None)``; None disables
                 the semantic strategy
        """
        self.llm = llm

    @classmethod
    def from_config(cls, config: Config) -> 'LinkExtractor':
        llm_config = LLMConfig.from_settings(config.link_llm_provider, config.link_llm_token)
        if not llm_config.is_configured:
            logger.debug("No LLM credential configured, semantic link extraction disabled")
            return cls(llm=None)
        return cls(llm=create_llm_client(llm_config))

    async def extract_links(self, content: Union[str, bytes]) -> List[ExtractedLink]:
        """
        Extract every link once. Never raises for malformed content.
        """
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        content = content or ""

        try:
            pattern_links = [l for l in extract_with_pattern(content) if is_valid_url(l.url)]
            html_links = extract_from_html(content)
            llm_links = await self.extract_with_llm(content)
            return deduplicate_links(pattern_links + html_links + llm_links)
        except Exception:
            logger.exception("Link extraction error, falling back to pattern matching")
            return deduplicate_links(extract_with_pattern(content))

    async def extract_with_llm(self, content: str) -> List[ExtractedLink]:
        if self.llm is None:
            return []

        prompt = PROMPT_TEMPLATE.format(content=content[:SEMANTIC_CHAR_LIMIT])
        try:
            response = await self.llm.ainvoke(prompt, system=SYSTEM_PROMPT)
        except Exception as e:
            logger.warning(f"LLM link extraction failed: {e}")
            return []

        text = response.get("text", "") if isinstance(response, dict) else str(response)
        try:
            return parse_llm_links(text)
        except ParseError as e:
            logger.info(f"Ignoring LLM link extraction output: {e}")
            return []


async def extract_links(content: Union[str, bytes], llm: Optional[Any] = None) -> List[ExtractedLink]:
    """Shortcut for ``LinkExtractor(llm).extract_links(content)``."""
    return await LinkExtractor(llm=llm).extract_links(content)
