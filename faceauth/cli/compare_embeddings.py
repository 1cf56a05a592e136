#!/usr/bin/env python
"""
Compare Embeddings

Runs the match evaluator offline: a query embedding is compared against a
file of stored embeddings using the authentication or duplicate-detection
policy from settings, and the decision is printed as JSON.

Usage:
    python -m faceauth.cli.compare_embeddings query.json candidates.json --policy duplicate

The query file holds a JSON array of numbers. The candidates file holds either
an object mapping identity ids to embeddings or a list of objects with "id"
and "face_descriptor" keys (the shape returned by a database export).
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from faceauth.core.config import settings
from faceauth.core.exceptions import EmbeddingValidationError
from faceauth.core.logging import get_logger
from faceauth.services.matching import find_best_match, validate_embedding
from faceauth.services.similarity import cosine_similarity, euclidean_distance

logger = get_logger(__name__)

POLICIES = ("auth", "duplicate")


def load_candidates(payload: Any) -> List[Tuple[str, Any]]:
    """
    Normalize a candidates document to (identity_id, embedding) pairs.

    Args:
        payload: Parsed JSON, either a mapping or a list of records

    Returns:
        Candidate pairs in file order
    """
    if isinstance(payload, dict):
        return [(str(identity_id), embedding) for identity_id, embedding in payload.items()]
    if isinstance(payload, list):
        return [
            (str(record.get("id")), record.get("face_descriptor"))
            for record in payload
            if isinstance(record, dict)
        ]
    raise ValueError("Candidates file must contain a JSON object or array")


def _metrics(identity_id: str, vector: Any, embedding: Any) -> dict:
    """Distance and similarity of one candidate, None for both when incomparable."""
    try:
        stored = validate_embedding(embedding, len(vector))
    except EmbeddingValidationError:
        return {"id": identity_id, "distance": None, "similarity": None}
    return {
        "id": identity_id,
        "distance": euclidean_distance(vector, stored),
        "similarity": cosine_similarity(vector, stored),
    }


def compare(query: Any, candidates: List[Tuple[str, Any]], policy_name: str) -> dict:
    """Evaluate a query against candidates and report per-candidate metrics."""
    policy = settings.auth_policy if policy_name == "auth" else settings.duplicate_policy
    vector = validate_embedding(query, settings.EMBEDDING_DIMENSION)
    result = find_best_match(vector, candidates, policy)

    return {
        "policy": policy_name,
        "matched": result.matched,
        "identity_id": result.identity_id,
        "confidence": round(result.confidence, 1),
        "candidates": [_metrics(identity_id, vector, embedding) for identity_id, embedding in candidates],
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, run the comparison and print the result."""
    parser = argparse.ArgumentParser(description="Compare a face embedding against stored embeddings")
    parser.add_argument("query", type=Path, help="JSON file holding the query embedding")
    parser.add_argument("candidates", type=Path, help="JSON file holding the stored embeddings")
    parser.add_argument(
        "--policy",
        choices=POLICIES,
        default="auth",
        help="Threshold policy to apply (default: auth)"
    )
    args = parser.parse_args(argv)

    try:
        query = json.loads(args.query.read_text())
        candidates = load_candidates(json.loads(args.candidates.read_text()))
        report = compare(query, candidates, args.policy)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error("Failed to read input", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except EmbeddingValidationError as e:
        print(f"Invalid query embedding: {e}", file=sys.stderr)
        return 2

    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
