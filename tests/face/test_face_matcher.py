from __future__ import annotations

import math

import pytest

from src.geoface_attendance.geoface_attendance.face.matcher import (
    DescriptorFormatError,
    FaceMatcher,
    parse_descriptor,
)


def test_identical_descriptors_match_with_zero_distance(reference_descriptor):
    result = FaceMatcher().matches(reference_descriptor, reference_descriptor)
    assert result.matches is True
    assert result.distance == 0.0
    assert result.threshold == 0.7


def test_distance_is_deterministic(reference_descriptor, descriptor_at):
    candidate = descriptor_at(0.3)
    first = FaceMatcher.euclidean(reference_descriptor, candidate)
    second = FaceMatcher.euclidean(reference_descriptor, candidate)
    assert first == second
    assert first == pytest.approx(0.3)


def test_distance_equal_to_threshold_matches():
    assert FaceMatcher(0.7).matches([0.0], [0.7]).matches is True


def test_distance_above_threshold_does_not_match(reference_descriptor, descriptor_at):
    result = FaceMatcher().matches(reference_descriptor, descriptor_at(0.95))
    assert result.matches is False
    assert result.distance == pytest.approx(0.95)


def test_per_call_threshold_overrides_default(reference_descriptor, descriptor_at):
    matcher = FaceMatcher(0.7)
    assert matcher.matches(reference_descriptor, descriptor_at(0.5), threshold=0.4).matches is False


@pytest.mark.parametrize(
    "stored,candidate",
    [
        ([0.1, 0.2, 0.3], [0.1, 0.2]),
        (None, [0.1]),
        ([0.1], None),
        ([], []),
        ([0.1, float("nan")], [0.1, 0.2]),
        ([[0.1], [0.2]], [[0.1], [0.2]]),
    ],
)
def test_incomparable_descriptors_have_infinite_distance_and_never_match(stored, candidate):
    assert math.isinf(FaceMatcher.euclidean(stored, candidate))
    assert FaceMatcher().matches(stored, candidate).matches is False


def test_parse_descriptor_accepts_json_and_sequences():
    assert parse_descriptor("[0.5, 1, -0.25]") == (0.5, 1.0, -0.25)
    assert parse_descriptor(b"[0.5]") == (0.5,)
    assert parse_descriptor([1, 2]) == (1.0, 2.0)


@pytest.mark.parametrize(
    "value",
    [
        "not json",
        "{}",
        '"0.5"',
        "[]",
        [True, 0.1],
        ["0.1", 0.2],
        [[0.1]],
        [float("inf")],
        {"a": 1},
        42,
    ],
)
def test_parse_descriptor_rejects_malformed_values(value):
    with pytest.raises(DescriptorFormatError):
        parse_descriptor(value)
