"""Tests for multi-strategy link extraction."""

import html
import json

import pytest
from unittest.mock import AsyncMock

from newsletter_core.errors import ParseError
from newsletter_core.links import (
    LinkExtractor,
    LinkType,
    NO_TEXT,
    categorize_link,
    extract_from_html,
    extract_links,
    extract_with_pattern,
    normalize_url,
    parse_llm_links,
)
from newsletter_core.links import extractor
from newsletter_core.links.urls import dedup_key

NEWSLETTER_HTML = """<html><body>
<p>Hello reader,</p>
<p>Read <a href="https://Example.com:443/posts/1">our latest post</a> today.</p>
<p>Follow us: <a href="https://www.facebook.com/acme">Facebook</a>
<a href="https://twitter.com/acme">Twitter</a></p>
<p><a href="mailto:hello@example.com">Write to us</a> <a href="/relative">Relative</a></p>
<p><a href="https://example.com/unsubscribe?id=42&amp;list=7">Unsubscribe</a></p>
</body></html>
"""


def make_llm(payload):
    llm = AsyncMock()
    text = payload if isinstance(payload, str) else json.dumps(payload)
    llm.ainvoke.return_value = {"text": text}
    return llm


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_unsubscribe_anchor(self):
        links = await extract_links('<a href="https://example.com/unsubscribe?id=1">Unsubscribe</a>')

        assert len(links) == 1
        assert links[0].url == "https://example.com/unsubscribe?id=1"
        assert links[0].type == LinkType.UNSUBSCRIBE
        assert links[0].text == "Unsubscribe"

    @pytest.mark.asyncio
    async def test_plain_text_social_link(self):
        links = await extract_links("Visit us at https://twitter.com/acme today")

        assert len(links) == 1
        assert links[0].url == "https://twitter.com/acme"
        assert links[0].type == LinkType.SOCIAL
        assert links[0].text == "Visit us at"

    @pytest.mark.asyncio
    async def test_single_url_round_trip(self):
        links = await LinkExtractor().extract_links("just one link: https://example.com/a/b?c=d and nothing else")

        assert [l.url for l in links] == ["https://example.com/a/b?c=d"]

    @pytest.mark.asyncio
    async def test_newsletter_has_no_duplicates(self):
        links = await extract_links(NEWSLETTER_HTML)
        keys = [dedup_key(l.url) for l in links]

        assert len(keys) == len(set(keys))
        assert set(keys) == {
            "https://example.com/posts/1",
            "https://www.facebook.com/acme",
            "https://twitter.com/acme",
            "https://example.com/unsubscribe?id=42&list=7",
            "mailto:hello@example.com",
        }

    @pytest.mark.asyncio
    async def test_extraction_is_idempotent(self):
        first = await extract_links(NEWSLETTER_HTML)
        again = await extract_links("\n".join(
            f'<a href="{html.escape(l.url)}">link</a>' for l in first
        ))

        assert [l.url for l in again] == [l.url for l in first]

    @pytest.mark.asyncio
    async def test_bytes_input(self):
        links = await extract_links("Read https://example.com/ünïcode now".encode("utf-8"))

        assert len(links) == 1
        assert links[0].url.startswith("https://example.com/")

    @pytest.mark.asyncio
    async def test_empty_content(self):
        assert await extract_links("") == []

    @pytest.mark.asyncio
    async def test_mailto_anchor_is_kept(self):
        links = await extract_links('<p><a href="MAILTO:hello@example.com">Write to us</a></p>')

        assert len(links) == 1
        assert links[0].url == "mailto:hello@example.com"
        assert links[0].text == "Write to us"
        assert links[0].type == LinkType.EXTERNAL

    @pytest.mark.asyncio
    async def test_dot_segments_merge_with_plain_url(self):
        links = await extract_links('<a href="https://example.com/a/../b">B</a>\nhttps://example.com/b')

        assert [l.url for l in links] == ["https://example.com/b"]

    @pytest.mark.asyncio
    async def test_encoded_and_raw_unicode_merge(self):
        links = await extract_links('<a href="https://example.com/caf%C3%A9">Menu</a>\nhttps://example.com/café')

        assert [l.url for l in links] == ["https://example.com/caf%C3%A9"]


class TestPatternStrategy:

    def test_trailing_punctuation_is_dropped(self):
        links = extract_with_pattern("See https://example.com/page. Or (https://example.com/x).")

        assert [l.url for l in links] == ["https://example.com/page", "https://example.com/x"]

    def test_text_falls_back_to_after_url(self):
        links = extract_with_pattern("https://example.com/a Read more")

        assert links[0].text == "Read more"

    def test_bare_url_has_placeholder_text(self):
        links = extract_with_pattern("line one\nhttps://example.com/a\nline three")

        assert links[0].text == NO_TEXT
        assert links[0].context == "line one https://example.com/a line three"

    def test_context_is_two_lines_each_side(self):
        content = "l1\nl2\nl3\nl4 https://example.com/x\nl5\nl6\nl7"
        links = extract_with_pattern(content)

        assert links[0].context == "l2 l3 l4 https://example.com/x l5 l6"


class TestStructuralStrategy:

    def test_scheme_hrefs_kept_relative_dropped(self):
        urls = [l.url for l in extract_from_html(NEWSLETTER_HTML)]

        assert "https://example.com/posts/1" in urls
        assert "mailto:hello@example.com" in urls
        assert not any(u.endswith("/relative") for u in urls)

    def test_context_is_parent_children_text(self):
        links = extract_from_html(
            '<div><span>Big sale</span><a href="https://shop.example.com">Shop now</a></div>'
        )

        assert links[0].text == "Shop now"
        assert links[0].context == "Big sale Shop now"

    def test_anchor_without_text(self):
        links = extract_from_html('<p><a href="https://example.com/img"><img src="x.png"></a></p>')

        assert links[0].text == NO_TEXT


class TestSemanticStrategy:

    @pytest.mark.asyncio
    async def test_model_links_are_merged(self):
        llm = make_llm([
            {"url": "https://example.com/hidden", "text": "Hidden", "context": "Footer", "type": "internal"},
        ])
        links = await LinkExtractor(llm=llm).extract_links("No visible links here")

        assert len(links) == 1
        assert links[0].url == "https://example.com/hidden"
        assert links[0].type == LinkType.EXTERNAL

    @pytest.mark.asyncio
    async def test_earlier_strategy_wins_on_duplicate(self):
        llm = make_llm([{"url": "https://twitter.com/acme", "text": "From model"}])
        links = await LinkExtractor(llm=llm).extract_links("Visit us at https://twitter.com/acme today")

        assert len(links) == 1
        assert links[0].text == "Visit us at"

    @pytest.mark.asyncio
    async def test_invalid_json_contributes_nothing(self):
        llm = make_llm("Sorry, I cannot help with that.")
        links = await LinkExtractor(llm=llm).extract_links("Visit https://example.com/a")

        assert [l.url for l in links] == ["https://example.com/a"]

    @pytest.mark.asyncio
    async def test_client_error_contributes_nothing(self):
        llm = AsyncMock()
        llm.ainvoke.side_effect = RuntimeError("rate limited")

        assert await LinkExtractor(llm=llm).extract_with_llm("content") == []

    @pytest.mark.asyncio
    async def test_prompt_is_truncated(self):
        llm = make_llm([])
        content = "x" * (extractor.SEMANTIC_CHAR_LIMIT + 500)

        await LinkExtractor(llm=llm).extract_with_llm(content)

        prompt = llm.ainvoke.call_args.args[0]
        assert "x" * extractor.SEMANTIC_CHAR_LIMIT in prompt
        assert "x" * (extractor.SEMANTIC_CHAR_LIMIT + 1) not in prompt
        assert llm.ainvoke.call_args.kwargs["system"] == extractor.SYSTEM_PROMPT

    def test_code_fences_are_stripped(self):
        links = parse_llm_links('```json\n[{"url": "https://example.com"}]\n```')

        assert [l.url for l in links] == ["https://example.com/"]

    def test_non_list_output_raises(self):
        with pytest.raises(ParseError):
            parse_llm_links('{"url": "https://example.com"}')

    def test_unusable_entries_are_dropped(self):
        links = parse_llm_links(json.dumps([
            "https://example.com",
            {"text": "no url"},
            {"url": "/relative"},
            {"url": "https://ok.example.com/"},
        ]))

        assert [l.url for l in links] == ["https://ok.example.com/"]


class TestFallback:

    @pytest.mark.asyncio
    async def test_structural_failure_falls_back_to_pattern(self, monkeypatch):
        def broken(content):
            raise RuntimeError("parser exploded")

        monkeypatch.setattr(extractor, "extract_from_html", broken)

        links = await extract_links("Visit https://example.com/a and https://example.com/a")

        assert [l.url for l in links] == ["https://example.com/a"]


class TestUrls:

    @pytest.mark.parametrize("raw,expected", [
        ("HTTPS://Example.COM", "https://example.com/"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("https://example.com:8443/a", "https://example.com:8443/a"),
        ("https://example.com/a?b=1#top", "https://example.com/a?b=1#top"),
        ("https://user:pw@Example.com/", "https://user:pw@example.com/"),
        ("http://[::1]:8080/", "http://[::1]:8080/"),
        ("https://example.com/a/./b/../c", "https://example.com/a/c"),
        ("https://example.com/a/b/..", "https://example.com/a/"),
        ("https://example.com/../../x", "https://example.com/x"),
        ("https://example.com/café?q=ü", "https://example.com/caf%C3%A9?q=%C3%BC"),
        ("https://example.com/a%20b?x=%2F", "https://example.com/a%20b?x=%2F"),
        ("Mailto:hello@example.com", "mailto:hello@example.com"),
        ("tel:+15551234567", "tel:+15551234567"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["/relative/path", "example.com", "mailto:", "http:///no-host", ""])
    def test_normalize_rejects_non_absolute(self, raw):
        with pytest.raises(ValueError):
            normalize_url(raw)

    @pytest.mark.parametrize("url,expected", [
        ("https://www.facebook.com/unsubscribe", LinkType.UNSUBSCRIBE),
        ("https://example.com/opt-out", LinkType.UNSUBSCRIBE),
        ("https://linkedin.com/company/acme", LinkType.SOCIAL),
        ("https://youtube.com/@acme", LinkType.SOCIAL),
        ("https://example.com/blog", LinkType.EXTERNAL),
    ])
    def test_categorize(self, url, expected):
        assert categorize_link(url) == expected

    def test_link_to_dict(self):
        link = extract_with_pattern("Visit us at https://twitter.com/acme today")[0]

        assert link.to_dict() == {
            "url": "https://twitter.com/acme",
            "text": "Visit us at",
            "context": "Visit us at https://twitter.com/acme today",
            "type": "social",
        }
