"""Tests for the match evaluator."""
import numpy as np
import pytest

from faceauth.core.exceptions import EmbeddingValidationError
from faceauth.domain.value_objects.matching import MatchPolicy
from faceauth.services.matching import compute_confidence, find_best_match, validate_embedding
from tests.factories import make_embedding, offset_embedding


@pytest.fixture
def strict_policy() -> MatchPolicy:
    """Policy used throughout the documented scenarios."""
    return MatchPolicy(
        distance_threshold=0.5,
        similarity_threshold=0.8,
        minimum_confidence=85,
        distance_weight=0.3,
        similarity_weight=0.7,
        max_confidence=95,
    )


@pytest.fixture
def lenient_policy() -> MatchPolicy:
    return MatchPolicy(distance_threshold=0.5, similarity_threshold=0.8, minimum_confidence=0)


class TestFindBestMatch:
    """Test suite for find_best_match."""

    def test_empty_candidate_list_is_no_match(self, strict_policy):
        result = find_best_match(make_embedding(1), [], strict_policy)
        assert not result.matched
        assert result.identity_id is None
        assert result.confidence == 0.0

    def test_identical_candidate_matches_with_high_confidence(self, strict_policy):
        query = make_embedding(1)
        result = find_best_match(query, [("alice", list(query))], strict_policy)

        assert result.matched
        assert result.identity_id == "alice"
        assert 85 <= result.confidence <= 95
        assert result.distance == 0.0

    def test_negated_candidate_is_rejected(self, strict_policy):
        query = make_embedding(1)
        result = find_best_match(query, [("alice", [-x for x in query])], strict_policy)
        assert not result.matched
        assert result.confidence == 0.0

    def test_closest_eligible_candidate_wins(self, lenient_policy):
        query = make_embedding(1)
        candidates = [
            ("first", offset_embedding(query, 0.2, seed=1)),
            ("exact", list(query)),
            ("third", offset_embedding(query, 0.1, seed=3)),
        ]
        result = find_best_match(query, candidates, lenient_policy)
        assert result.identity_id == "exact"

    def test_equal_distance_keeps_first_in_input_order(self, lenient_policy):
        query = make_embedding(1)
        twin = offset_embedding(query, 0.1, seed=7)
        result = find_best_match(query, [("first", twin), ("second", list(twin))], lenient_policy)
        assert result.identity_id == "first"

    def test_close_but_misaligned_candidate_is_rejected(self, lenient_policy):
        # Small vectors pointing in opposite directions: distance passes, similarity fails
        query = [0.01] + [0.0] * 127
        candidate = [-0.01] + [0.0] * 127
        result = find_best_match(query, [("opposite", candidate)], lenient_policy)
        assert not result.matched

    def test_aligned_but_distant_candidate_is_rejected(self, lenient_policy):
        # Same direction, three times the magnitude: similarity passes, distance fails
        query = make_embedding(1)
        result = find_best_match(query, [("scaled", [x * 3 for x in query])], lenient_policy)
        assert not result.matched

    def test_minimum_confidence_downgrades_weak_match(self, strict_policy, lenient_policy):
        query = [1.0] + [0.0] * 127
        candidate = [1.0, 0.4] + [0.0] * 126  # distance 0.4, similarity ~0.93

        assert find_best_match(query, [("weak", candidate)], lenient_policy).matched

        result = find_best_match(query, [("weak", candidate)], strict_policy)
        assert not result.matched
        assert result.confidence == 0.0

    def test_incomparable_candidates_are_skipped(self, lenient_policy):
        query = make_embedding(1)
        candidates = [
            ("short", query[:64]),
            ("garbage", ["a"] * 128),
            ("missing", None),
            ("nan", [float("nan")] * 128),
            ("good", list(query)),
        ]
        result = find_best_match(query, candidates, lenient_policy)
        assert result.matched
        assert result.identity_id == "good"

    def test_only_incomparable_candidates_is_no_match(self, lenient_policy):
        result = find_best_match(make_embedding(1), [("short", [0.1] * 10)], lenient_policy)
        assert not result.matched

    def test_distinct_faces_do_not_match(self, lenient_policy):
        query = make_embedding(1)
        others = [(f"user-{seed}", make_embedding(seed)) for seed in range(2, 12)]
        assert not find_best_match(query, others, lenient_policy).matched

    @pytest.mark.parametrize("distance", [0.0, 0.05, 0.2, 0.35, 0.49])
    def test_confidence_stays_within_bounds(self, lenient_policy, distance):
        query = make_embedding(1)
        result = find_best_match(query, [("c", offset_embedding(query, distance))], lenient_policy)
        assert 0.0 <= result.confidence <= lenient_policy.max_confidence


class TestComputeConfidence:
    """Test suite for compute_confidence."""

    def test_weighted_blend(self, lenient_policy):
        # distance score (1 - 0.25/0.5) * 100 = 50, similarity score 90
        assert compute_confidence(0.25, 0.9, lenient_policy) == pytest.approx(0.3 * 50 + 0.7 * 90)

    def test_capped_at_max_confidence(self, lenient_policy):
        assert compute_confidence(0.0, 1.0, lenient_policy) == 95.0

    def test_never_negative(self, lenient_policy):
        assert compute_confidence(10.0, -1.0, lenient_policy) == 0.0


class TestValidateEmbedding:
    """Test suite for validate_embedding."""

    def test_accepts_list_of_numbers(self):
        vector = validate_embedding(make_embedding(1))
        assert isinstance(vector, np.ndarray)
        assert vector.shape == (128,)

    def test_accepts_integers(self):
        assert validate_embedding([0] * 128).dtype == np.float64

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "not an array",
            {"values": [0.1] * 128},
            [0.1] * 127,
            [0.1] * 129,
            [0.1] * 127 + ["x"],
            [0.1] * 127 + [True],
            [0.1] * 127 + [float("inf")],
            np.zeros((2, 64)),
        ],
    )
    def test_rejects_malformed_values(self, value):
        with pytest.raises(EmbeddingValidationError):
            validate_embedding(value)

    def test_length_error_reports_details(self):
        with pytest.raises(EmbeddingValidationError) as exc_info:
            validate_embedding([0.1] * 3)
        assert exc_info.value.details == {"expected": 128, "received": 3}

    def test_custom_dimension(self):
        assert validate_embedding([0.5, 0.5], dimension=2).shape == (2,)


class TestMatchPolicy:
    """Test suite for MatchPolicy validation."""

    def test_defaults(self):
        policy = MatchPolicy()
        assert policy.distance_weight + policy.similarity_weight == pytest.approx(1.0)
        assert policy.max_confidence == 95.0

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            MatchPolicy(distance_weight=0.5, similarity_weight=0.7)

    def test_minimum_cannot_exceed_cap(self):
        with pytest.raises(ValueError):
            MatchPolicy(minimum_confidence=96, max_confidence=95)

    def test_distance_threshold_must_be_positive(self):
        with pytest.raises(ValueError):
            MatchPolicy(distance_threshold=0)

    def test_is_immutable(self):
        policy = MatchPolicy()
        with pytest.raises(ValueError):
            policy.distance_threshold = 1.0
