"""Tests for the transmission policy."""

import math

from gw2_presence.application.transmission_policy import TransmissionPolicy, elapsed

POLICY = TransmissionPolicy(
    online_debounce_seconds=5.0,
    location_threshold_seconds=10.0,
    distance_threshold=2.0,
)


def test_elapsed_since_never_is_infinite() -> None:
    """Given no previous event, when computing elapsed time, then it is infinite."""
    assert elapsed(100.0, None) == math.inf
    assert elapsed(100.0, 40.0) == 60.0


def test_should_link_after_debounce_window() -> None:
    """Given an offline timestamp, when the window has passed, then linking is allowed."""
    assert not POLICY.should_link(now=3.0, offline_since=0.0)
    assert POLICY.should_link(now=5.0, offline_since=0.0)
    assert POLICY.should_link(now=5.1, offline_since=0.0)


def test_should_link_immediately_when_never_offline() -> None:
    """Given no offline timestamp, when checking, then linking is allowed."""
    assert POLICY.should_link(now=0.0, offline_since=None)


def test_should_unlink_only_after_window() -> None:
    """Given an offline timestamp, when checking unlink, then the window must pass."""
    assert not POLICY.should_unlink(now=14.9, offline_since=10.0)
    assert POLICY.should_unlink(now=15.0, offline_since=10.0)


def test_should_unlink_requires_offline_timestamp() -> None:
    """Given no offline timestamp, when checking unlink, then it is never allowed."""
    assert not POLICY.should_unlink(now=1000.0, offline_since=None)


def test_identity_due_respects_location_threshold() -> None:
    """Given a previous transmission, when checking identity, then the time threshold applies."""
    assert POLICY.identity_due(now=0.0, last_transmission=None)
    assert not POLICY.identity_due(now=19.0, last_transmission=10.0)
    assert POLICY.identity_due(now=20.0, last_transmission=10.0)


def test_position_due_requires_time_and_distance() -> None:
    """Given position changes, when checking, then both thresholds must be met."""
    # Small move never transmits, however long ago the last transmission was
    assert not POLICY.position_due(now=1000.0, last_transmission=0.0, displacement=1.0)
    assert not POLICY.position_due(now=1000.0, last_transmission=None, displacement=1.0)
    # Large move waits for the time threshold
    assert not POLICY.position_due(now=5.0, last_transmission=0.0, displacement=3.0)
    assert POLICY.position_due(now=10.0, last_transmission=0.0, displacement=3.0)
    assert POLICY.position_due(now=10.0, last_transmission=0.0, displacement=2.0)
