"""
Tests for first-match-wins keyword matching.
"""

from __future__ import annotations

from chatwidget.keywords import match_keyword_response
from chatwidget.schemas import KeywordResponse


def _response(rid: str, keywords: list[str], priority: int = 0, is_active: bool = True) -> KeywordResponse:
    return KeywordResponse(id=rid, user_id="u1", keywords=keywords, response=f"reply {rid}",
                           priority=priority, is_active=is_active)


def test_first_match_in_given_order_wins() -> None:
    responses = [_response("a", ["price"], 10), _response("b", ["pricing", "cost"], 5)]

    assert match_keyword_response("What is your PRICING?", responses).id == "a"
    assert match_keyword_response("how much does it cost", responses).id == "b"


def test_inactive_and_blank_keywords_are_skipped() -> None:
    responses = [_response("off", ["hello"], is_active=False), _response("blank", ["  ", ""]), _response("on", ["hello"])]

    assert match_keyword_response("hello there", responses).id == "on"


def test_no_match() -> None:
    assert match_keyword_response("refund please", [_response("a", ["price"])]) is None
    assert match_keyword_response("", [_response("a", ["price"])]) is None
    assert match_keyword_response("price", []) is None
