"""Similarity primitives for face embeddings.

Both functions are pure and deterministic: inputs are converted to 1-D
float64 arrays and reduced in a fixed order, so identical inputs always give
bit-identical results.
"""
import math
from typing import Sequence, Union

import numpy as np

Vector = Union[Sequence[float], np.ndarray]


def as_vector(values: Vector) -> np.ndarray:
    """Convert an embedding to a flat float64 array."""
    return np.asarray(values, dtype=np.float64).ravel()


def euclidean_distance(a: Vector, b: Vector) -> float:
    """
    Straight-line distance between two embeddings.

    Args:
        a: First embedding
        b: Second embedding

    Returns:
        Non-negative distance, 0 for identical vectors, or ``math.inf`` when
        the lengths differ so the pair can never pass a distance threshold.
    """
    vec_a = as_vector(a)
    vec_b = as_vector(b)
    if vec_a.shape != vec_b.shape:
        return math.inf

    diff = vec_a - vec_b
    return float(np.sqrt(np.dot(diff, diff)))


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Directional alignment of two embeddings, independent of magnitude.

    Args:
        a: First embedding
        b: Second embedding

    Returns:
        Similarity in [-1, 1]. Returns 0.0 instead of NaN when the lengths
        differ or either vector has zero magnitude.
    """
    vec_a = as_vector(a)
    vec_b = as_vector(b)
    if vec_a.shape != vec_b.shape:
        return 0.0

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    # Rounding can push identical directions a hair past 1
    return max(-1.0, min(1.0, similarity))
