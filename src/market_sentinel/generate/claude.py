import logging
import os
from typing import Any
from urllib.parse import urlparse

import anthropic

from market_sentinel.data import APICallUsage, GenerationResult, SourceLink, ToolConfig

logger = logging.getLogger(__name__)

MISSING_URI = "#"


def citation_title(title: str | None, url: str | None) -> str:
    """Pick a display title for a search result.

    Falls back to the result's domain (without ``www.``), then to "Source".
    """
    if title:
        return title
    domain = urlparse(url or "").netloc
    if domain.startswith("www."):
        domain = domain[4:]
    return domain or "Source"


class ClaudeGenerator:
    """Generate text with Anthropic's Claude, optionally grounded by web search.

    Uses Anthropic's server-side web search tool, so the search results come
    back in the same response and double as citations.

    Args:
        api_key: Anthropic API key (defaults to CLAUDE_API_KEY env var).
    """

    def __init__(self, *, api_key: str | None = None) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)

    async def generate(
        self,
        model: str,
        prompt: str,
        config: ToolConfig,
    ) -> GenerationResult:
        """Run one completion against ``model``.

        SDK errors propagate untouched so the dispatcher can classify them.
        """
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if config.web_search:
            kwargs["tools"] = [
                {
                    "type": "web_search_20250305",
                    "name": "web_search",
                    "max_uses": config.max_searches,
                }
            ]

        response = await self._client.messages.create(**kwargs)

        # Count web searches from server_tool_use in usage
        web_searches = 0
        server_tool_use = getattr(response.usage, "server_tool_use", None)
        if server_tool_use is not None:
            web_searches = getattr(server_tool_use, "web_search_requests", 0) or 0

        usage = APICallUsage(
            model=model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            web_searches=web_searches,
        )

        text_parts: list[str] = []
        citations: list[SourceLink] = []
        seen_urls: set[str] = set()

        for block in response.content:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "web_search_tool_result":
                content = block.content
                # An error result carries an error object instead of a list
                if not isinstance(content, list):
                    continue
                for result in content:
                    url = getattr(result, "url", None)
                    if url and url in seen_urls:
                        continue
                    if url:
                        seen_urls.add(url)
                    citations.append(
                        SourceLink(
                            title=citation_title(getattr(result, "title", None), url),
                            uri=url or MISSING_URI,
                        )
                    )

        logger.debug(
            "Generated %d chars with %s (%d citations)",
            sum(len(p) for p in text_parts),
            model,
            len(citations),
        )
        return GenerationResult(
            text="".join(text_parts),
            citations=tuple(citations),
            model=model,
            usage=usage,
        )
