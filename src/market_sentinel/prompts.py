"""Prompt templates for market intelligence requests."""

from collections.abc import Sequence

from market_sentinel.data import MarketEvent

DEFAULT_KEYWORDS: tuple[str, ...] = ("macroeconomics", "geopolitics")
DEFAULT_LANGUAGE = "English"
DEFAULT_TREND_COUNT = 10

EVENT_SCHEMA = """\
[
  {{
    "title": "{title_hint}",
    "summary": "{summary_hint}",
    "region": "{region_hint}",
    "severity": "HIGH" | "MEDIUM" | "LOW",
    "affectedStocks": [
      {{
        "symbol": "AAPL",
        "name": "Apple Inc.",
        "impact": "BULLISH" | "BEARISH" | "NEUTRAL" | "VOLATILE",
        "reasoning": "Why this instrument is affected"
      }}
    ]
  }}
]\
"""

INTELLIGENCE_PROMPT = """\
You are a senior financial analyst.
Task: search for international news, geopolitical events or macroeconomic \
changes from the past 24 hours that have a significant impact on the US \
stock market.
Focus areas: {keywords}.

For each event you find:
1. Assess how severe its impact on the US stock market is.
2. Identify the directly affected US tickers (or ETFs).
3. Judge whether the effect is BULLISH or BEARISH.
4. Give a concise reason.

Write all text in {language}.

Output format:
Return ONLY a valid JSON array of objects. Do not include any preamble \
or closing remarks. Start directly with "[".

The JSON structure must be:
{schema}\
"""

TRENDS_PROMPT = """\
You are a global macro strategist.
Task: identify the top {count} key trends currently shaping global financial \
markets. They can be long-running shifts (such as the AI revolution or the \
energy transition) or sharp short-term changes (such as an escalating \
regional conflict).

Write all text in {language}.

Output format:
Return ONLY a valid JSON array containing exactly {count} objects. Do not \
include any preamble or closing remarks. Start directly with "[".

The JSON structure must be:
{schema}\
"""

NOTIFICATION_PROMPT = """\
Draft a professional and urgent market alert email addressed to {recipient}.
Language: {language}.

Subject: {title}
Severity: {severity}
Summary: {summary}
Affected assets: {assets}.

The tone should be objective, professional and actionable.
Format the email with HTML tags (use <b>, <br>, <ul>, <li> and similar).\
"""


def build_intelligence_prompt(
    keywords: Sequence[str],
    *,
    language: str = DEFAULT_LANGUAGE,
    default_keywords: Sequence[str] = DEFAULT_KEYWORDS,
) -> str:
    """Prompt for recent market-moving events filtered by ``keywords``.

    An empty keyword list falls back to ``default_keywords``.
    """
    cleaned = [k.strip() for k in keywords if k.strip()]
    keyword_text = ", ".join(cleaned or default_keywords)
    schema = EVENT_SCHEMA.format(
        title_hint="Event title",
        summary_hint="Two-sentence summary",
        region_hint="Region of origin (e.g. China, Europe, Middle East)",
    )
    return INTELLIGENCE_PROMPT.format(keywords=keyword_text, language=language, schema=schema)


def build_trends_prompt(
    *,
    count: int = DEFAULT_TREND_COUNT,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Prompt for exactly ``count`` global trend records."""
    schema = EVENT_SCHEMA.format(
        title_hint="Trend name",
        summary_hint="What the trend is and how it affects the global economy",
        region_hint="Global",
    )
    return TRENDS_PROMPT.format(count=count, language=language, schema=schema)


def build_notification_prompt(
    event: MarketEvent,
    recipient: str,
    *,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Prompt asking for an HTML alert email about one event."""
    assets = ", ".join(f"{s.symbol} ({s.impact})" for s in event.affected_stocks)
    return NOTIFICATION_PROMPT.format(
        recipient=recipient,
        language=language,
        title=event.title,
        severity=event.severity,
        summary=event.summary,
        assets=assets or "none listed",
    )
