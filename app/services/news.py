"""
news.py
-------

AI news feed backed by NewsAPI, with a built-in fallback list when no API
key is configured.
"""

from datetime import datetime, timedelta, timezone

import requests

from app.logger import logger

AI_KEYWORDS = [
    "artificial intelligence",
    "ai",
    "machine learning",
    "ml",
    "deep learning",
    "neural networks",
    "chatgpt",
    "openai",
    "google",
    "microsoft",
    "anthropic",
    "claude",
    "bard",
    "midjourney",
    "stable diffusion",
    "dall-e",
    "copilot",
]
MAX_TAGS = 5


class NewsServiceError(Exception):
    """Raised when the upstream news provider fails."""


def extract_tags(text):
    """Up to five AI keywords found in ``text`` (substring, case-insensitive)."""
    lower_text = (text or "").lower()
    return [kw for kw in AI_KEYWORDS if kw in lower_text][:MAX_TAGS]


def fallback_news(now=None):
    now = now or datetime.now(timezone.utc)
    return [
        {
            "id": "fallback-1",
            "title": "OpenAI Releases GPT-4 Turbo with Enhanced Capabilities",
            "description": (
                "OpenAI has announced the release of GPT-4 Turbo, featuring "
                "improved performance and longer context windows."
            ),
            "url": "https://openai.com/blog/gpt-4-turbo",
            "source": "OpenAI Blog",
            "published_at": (now - timedelta(hours=2)).isoformat(),
            "category": "ai-news",
            "tags": ["openai", "gpt-4", "turbo"],
        },
        {
            "id": "fallback-2",
            "title": "Google Launches Gemini Pro with Advanced Features",
            "description": (
                "Google has unveiled Gemini Pro, their latest AI model with "
                "multimodal capabilities."
            ),
            "url": "https://ai.google.dev/gemini",
            "source": "Google AI",
            "published_at": (now - timedelta(hours=4)).isoformat(),
            "category": "ai-news",
            "tags": ["google", "gemini", "multimodal"],
        },
    ]


def _to_item(index, article):
    description = article.get("description")
    if not description:
        content = article.get("content") or ""
        description = f"{content[:200]}..."
    title = article.get("title") or ""
    return {
        "id": f"news-{index}",
        "title": title,
        "description": description,
        "url": article.get("url"),
        "source": (article.get("source") or {}).get("name"),
        "published_at": article.get("publishedAt"),
        "image_url": article.get("urlToImage"),
        "category": "ai-news",
        "tags": extract_tags(f"{title} {article.get('description') or ''}"),
    }


def fetch_news(api_key, api_url, timeout=10, page_size=20):
    """
    Latest AI articles.

    Returns the fallback list when ``api_key`` is empty.

    Raises:
        NewsServiceError: on network failure, a non-2xx response, or a
        payload without ``articles``.
    """
    if not api_key:
        logger.debug("No news API key configured, serving fallback news.")
        return fallback_news()

    params = {
        "q": "artificial intelligence AI",
        "language": "en",
        "sortBy": "publishedAt",
        "pageSize": page_size,
        "apiKey": api_key,
    }
    try:
        response = requests.get(api_url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.error("Error calling news provider.", error=str(e))
        raise NewsServiceError("Failed to fetch news") from e

    if not response.ok:
        logger.error(
            "News provider returned an error.", status_code=response.status_code
        )
        raise NewsServiceError("Failed to fetch news")

    try:
        articles = response.json().get("articles")
    except ValueError as e:
        raise NewsServiceError("Invalid response from news provider") from e
    if not articles:
        raise NewsServiceError("No articles found")
    return [_to_item(index, article) for index, article in enumerate(articles)]
