"""Tests for idempotent tier switching."""

import pytest

from tier_router import DEFAULT_CATALOG, DecisionApplier, Provenance, RoutingDecision, RoutingState


@pytest.fixture
def applier():
    return DecisionApplier(DEFAULT_CATALOG)


@pytest.mark.asyncio
async def test_same_tier_issues_no_switch_but_emits_status(applier, host):
    state = RoutingState()
    decision = RoutingDecision("claude-sonnet-4-6", Provenance.HEURISTIC)

    assert await applier.apply(state, decision, host)
    assert host.switch_calls == []
    assert host.last_status == "→ sonnet 4.6 (heuristic)"
    assert state.last_routed == "claude-sonnet-4-6"


@pytest.mark.asyncio
async def test_switches_and_commits(applier, host):
    state = RoutingState()
    assert await applier.apply(state, RoutingDecision("claude-opus-4-6", Provenance.ARBITER), host)
    assert host.switch_calls == ["claude-opus-4-6"]
    assert host.active == "claude-opus-4-6"
    assert state.last_routed == "claude-opus-4-6"
    assert host.last_status == "→ opus 4.6 (arbiter)"


@pytest.mark.asyncio
async def test_pinned_status_prefix(applier, host):
    await applier.apply(RoutingState(), RoutingDecision("claude-opus-4-6", Provenance.PINNED), host)
    assert host.last_status == "📌 opus 4.6 (pinned)"


@pytest.mark.asyncio
async def test_failed_switch_is_not_committed(applier, host):
    host.switch_result = False
    state = RoutingState(last_routed="claude-sonnet-4-6")

    assert not await applier.apply(state, RoutingDecision("claude-opus-4-6", Provenance.HEURISTIC), host)
    assert state.last_routed == "claude-sonnet-4-6"
    assert host.active == "claude-sonnet-4-6"
    assert host.last_status.startswith("⚠")
    assert host.warnings

    # retried on the next attempt
    host.switch_result = True
    assert await applier.apply(state, RoutingDecision("claude-opus-4-6", Provenance.HEURISTIC), host)
    assert host.switch_calls == ["claude-opus-4-6", "claude-opus-4-6"]
    assert state.last_routed == "claude-opus-4-6"


@pytest.mark.asyncio
async def test_switch_exception_is_contained(applier, host):
    host.switch_result = RuntimeError("registry offline")
    state = RoutingState()
    assert not await applier.apply(state, RoutingDecision("claude-opus-4-6", Provenance.HEURISTIC), host)
    assert "registry offline" in host.last_status
    assert state.last_routed is None


@pytest.mark.asyncio
async def test_unknown_tier_is_not_committed(applier, host):
    state = RoutingState()
    assert not await applier.apply(state, RoutingDecision("gpt-9", Provenance.HEURISTIC), host)
    assert host.switch_calls == []
    assert state.last_routed is None
    assert host.warnings


def test_degraded_status_message(applier):
    decision = RoutingDecision("claude-sonnet-4-6", Provenance.ARBITER, "unavailable", degraded=True)
    assert applier.status_message(decision) == "⚠ sonnet 4.6 (arbiter unavailable)"
