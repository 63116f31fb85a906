"""Cosine similarity between embedding vectors."""

import math
from collections.abc import Sequence


class InvalidInputError(ValueError):
    """Raised when vectors cannot be compared."""


def _max_abs(vec: Sequence[float]) -> float:
    largest = 0.0
    for x in vec:
        if not math.isfinite(x):
            raise InvalidInputError("Vectors must contain only finite values")
        largest = max(largest, abs(x))
    return largest


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Calculate cosine similarity between two equal-length vectors.

    Each vector is divided by its largest absolute component before
    accumulating, so squared sums neither overflow nor underflow for any
    finite input. Accumulation is a single index-ascending pass, so identical
    inputs always produce identical results. Returns 0.0 when either vector
    has zero norm.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Similarity in [-1.0, 1.0]

    Raises:
        InvalidInputError: If lengths differ or a component is not finite
    """
    if len(vec1) != len(vec2):
        raise InvalidInputError(
            f"Vector length mismatch: {len(vec1)} != {len(vec2)}"
        )

    scale1 = _max_abs(vec1)
    scale2 = _max_abs(vec2)

    if scale1 == 0 or scale2 == 0:
        return 0.0

    dot_product = 0.0
    magnitude1 = 0.0
    magnitude2 = 0.0

    for a, b in zip(vec1, vec2):
        a /= scale1
        b /= scale2
        dot_product += a * b
        magnitude1 += a * a
        magnitude2 += b * b

    score = dot_product / (math.sqrt(magnitude1) * math.sqrt(magnitude2))

    if math.isnan(score):
        raise InvalidInputError("Similarity is undefined for these vectors")

    # Rounding can push parallel vectors a hair past +/-1
    return max(-1.0, min(1.0, score))
