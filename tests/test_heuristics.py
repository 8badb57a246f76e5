"""Tests for the local prompt classifier."""

import pytest

from tier_router import HIGH_TIER_SIGNALS, Classification, classify
from tier_router.heuristics import check_signals


def test_short_prompt_is_low():
    assert classify("what does this function do?") == Classification.LOW


def test_empty_prompt_is_low():
    assert classify("") == Classification.LOW


def test_99_chars_is_low():
    assert classify("a" * 99) == Classification.LOW


def test_medium_prompt_without_signals_is_low():
    prompt = "Can you add a button to the homepage that opens a modal with a confirmation message? " * 2
    assert 100 <= len(prompt) < 400
    assert classify(prompt) == Classification.LOW


def test_399_chars_is_low_and_400_is_uncertain():
    assert classify("x" * 399) == Classification.LOW
    assert classify("x" * 400) == Classification.UNCERTAIN


def test_long_prompt_without_signals_is_uncertain():
    prompt = "Please help me understand this codebase. " * 20
    assert len(prompt) >= 400
    assert classify(prompt) == Classification.UNCERTAIN


@pytest.mark.parametrize("prompt", [
    "There's a race condition in the auth middleware, can you help debug it?",
    "My server has a memory leak that only shows up in production after a few hours",
    "Help me architect a multi-tenant SaaS backend from scratch",
    "What's the best migration strategy for moving from a monolith to microservices?",
    "Can you do a security audit of this authentication flow?",
    "Rename UserService to AccountService across the codebase",
    "Design a state machine for order lifecycle management",
    "Walk me through why this recursive algorithm is producing incorrect results",
    "What's the trade-off between using Redis vs Postgres for session storage?",
])
def test_signal_phrases_are_high(prompt):
    assert classify(prompt) == Classification.HIGH


def test_signals_win_over_length():
    assert classify("x" * 400 + " memory leak") == Classification.HIGH
    assert classify("y" * 5000 + " deadlock") == Classification.HIGH


def test_case_insensitive():
    for prompt in ["Help me ARCHITECT this system", "There is a RACE CONDITION in this code", "x" * 450, "hi"]:
        assert classify(prompt) == classify(prompt.upper())
    assert classify("There is a RACE CONDITION in this code") == Classification.HIGH


def test_substring_match_inside_larger_word():
    # "architect" inside "architectural"
    assert classify("some architectural notes") == Classification.HIGH


def test_custom_signals_and_threshold():
    assert classify("please optimize", signals=("optimize",)) == Classification.HIGH
    assert classify("race condition", signals=()) == Classification.LOW
    assert classify("x" * 50, long_prompt_chars=50) == Classification.UNCERTAIN


def test_default_signals_are_valid():
    assert len(HIGH_TIER_SIGNALS) > 0
    assert len(set(HIGH_TIER_SIGNALS)) == len(HIGH_TIER_SIGNALS)
    assert all(s == s.lower() for s in HIGH_TIER_SIGNALS)
    assert check_signals(HIGH_TIER_SIGNALS) == []


def test_check_signals_reports_problems():
    problems = check_signals(["Deadlock", "flaky", "flaky"])
    assert any("not lowercase" in p for p in problems)
    assert any("duplicate" in p for p in problems)
