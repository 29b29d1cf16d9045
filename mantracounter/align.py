"""
Global alignment of a recognized segment against the reference chant.

Needleman-Wunsch with match +1, mismatch -1 and gap -1. The traceback
reports reference positions that were deleted or substituted; extra
recognized tokens are skipped silently.
"""

from typing import List, Sequence

import numpy as np

from .types import Token


MATCH_SCORE = 1
MISMATCH_SCORE = -1
GAP_PENALTY = -1


def score_matrix(reference: Sequence[Token], recognized: Sequence[Token]) -> np.ndarray:
    """
    Build the (len(reference)+1) x (len(recognized)+1) alignment matrix.

    Row 0 and column 0 hold the cumulative gap cost.
    """
    rows, cols = len(reference) + 1, len(recognized) + 1
    matrix = np.zeros((rows, cols), dtype=np.int64)
    matrix[:, 0] = np.arange(rows) * GAP_PENALTY
    matrix[0, :] = np.arange(cols) * GAP_PENALTY

    for i in range(1, rows):
        for j in range(1, cols):
            pair = MATCH_SCORE if reference[i - 1] == recognized[j - 1] else MISMATCH_SCORE
            matrix[i, j] = max(
                matrix[i - 1, j - 1] + pair,
                matrix[i - 1, j] + GAP_PENALTY,
                matrix[i, j - 1] + GAP_PENALTY,
            )

    return matrix


def find_missing(reference: Sequence[Token], recognized: Sequence[Token]) -> List[int]:
    """
    Return reference positions with no acceptable match, ascending.

    Tie-break during traceback: match, then deletion (up), then
    insertion (left), then substitution (diagonal).

    Examples:
        find_missing(REFERENCE_PATTERN, REFERENCE_PATTERN) -> []
        find_missing(REFERENCE_PATTERN, [""] * 16) -> [0, 1, ..., 15]
    """
    matrix = score_matrix(reference, recognized)
    missing: List[int] = []

    i, j = len(reference), len(recognized)
    while i > 0 and j > 0:
        if reference[i - 1] == recognized[j - 1]:
            i -= 1
            j -= 1
        elif matrix[i, j] == matrix[i - 1, j] + GAP_PENALTY:
            missing.append(i - 1)
            i -= 1
        elif matrix[i, j] == matrix[i, j - 1] + GAP_PENALTY:
            j -= 1
        else:
            missing.append(i - 1)
            i -= 1
            j -= 1

    # Recognized side exhausted: every remaining reference word is missing
    while i > 0:
        missing.append(i - 1)
        i -= 1

    missing.reverse()
    return missing
