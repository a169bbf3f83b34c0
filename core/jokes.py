# =============================================================================
# core/jokes.py  —  Joke API clients
# =============================================================================
#
# Thin wrappers over two free, keyless APIs:
#   - https://api.chucknorris.io   (random joke, by category, category list)
#   - https://icanhazdadjoke.com   (random dad joke, JSON via Accept header)
#
# Each function returns plain text.  Failures raise UpstreamError; the MCP
# tool layer turns that into an "Error: ..." reply.
# =============================================================================

from typing import Any

from core.http import DEFAULT_TIMEOUT, UpstreamError, fetch_json

CHUCK_NORRIS_URL = "https://api.chucknorris.io/jokes"
DAD_JOKE_URL = "https://icanhazdadjoke.com/"


def get_chuck_joke(category: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch a random Chuck Norris joke, optionally from one category."""
    params = {"category": category} if category else None
    data = fetch_json(f"{CHUCK_NORRIS_URL}/random", params=params, timeout=timeout)
    return _text_field(data, "value")


def get_chuck_categories(timeout: float = DEFAULT_TIMEOUT) -> list[str]:
    """List the categories accepted by get_chuck_joke()."""
    data = fetch_json(f"{CHUCK_NORRIS_URL}/categories", timeout=timeout)
    if not isinstance(data, list):
        raise UpstreamError("Chuck Norris API returned an unexpected category list")
    return [str(c) for c in data]


def get_dad_joke(timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch a random dad joke."""
    # icanhazdadjoke serves HTML unless asked for JSON; fetch_json sends
    # Accept: application/json on every request.
    data = fetch_json(DAD_JOKE_URL, timeout=timeout)
    return _text_field(data, "joke")


def _text_field(data: Any, key: str) -> str:
    if not isinstance(data, dict) or not data.get(key):
        raise UpstreamError(f"Joke API response had no '{key}' field")
    return str(data[key])
