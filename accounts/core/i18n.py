"""Message catalogs keyed by message code."""

import json
from functools import lru_cache
from pathlib import Path

from fastapi import Request

from accounts.core.config import settings

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


@lru_cache
def load_catalog(language: str) -> dict[str, str]:
    """Load the catalog for a language, or an empty one if none ships."""
    path = LOCALES_DIR / f"{language}.json"
    if not path.is_file():
        return {}
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def supported_languages() -> set[str]:
    return {path.stem for path in LOCALES_DIR.glob("*.json")}


def translate(key: str, language: str | None = None) -> str:
    """Resolve a message key, falling back to the default language and then the key itself."""
    for lang in (language, settings.default_language):
        if lang:
            message = load_catalog(lang).get(key)
            if message is not None:
                return message
    return key


def parse_accept_language(header: str | None) -> str:
    """Pick the first supported language from an Accept-Language header."""
    if not header:
        return settings.default_language
    available = supported_languages()
    for part in header.split(","):
        tag = part.split(";")[0].strip().lower()
        if not tag:
            continue
        primary = tag.split("-")[0]
        if primary in available:
            return primary
    return settings.default_language


def get_language(request: Request) -> str:
    """FastAPI dependency returning the request's language."""
    return parse_accept_language(request.headers.get("accept-language"))
