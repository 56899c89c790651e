from typing import Iterable, Optional

from .schemas import KeywordResponse


def match_keyword_response(text: str, responses: Iterable[KeywordResponse]) -> Optional[KeywordResponse]:
    """First active response, in the order given, with a keyword contained in ``text`` (case-insensitive)."""
    if not text:
        return None
    haystack = text.casefold()
    for candidate in responses:
        if not candidate.is_active:
            continue
        for keyword in candidate.keywords:
            needle = keyword.strip().casefold()
            if needle and needle in haystack:
                return candidate
    return None
