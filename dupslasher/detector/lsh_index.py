"""Wrapper around datasketch.MinHashLSH for candidate-pair generation.

Band parameters are derived from the distance threshold so that banding never
drops a pair the full pairwise scan would report: a pair below the threshold
differs in at most *k* slots, and with at least *k + 1* bands at least one band
is identical in both signatures.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np
from datasketch import MinHash, MinHashLSH


def band_params(num_hashes: int, threshold: float) -> Tuple[int, int]:
    """Return ``(bands, rows)`` that keep every pair with distance < *threshold*."""
    # Most mismatching slots a reported pair can have, using the scan's own comparison.
    worst = max(
        (k for k in range(num_hashes + 1) if 1.0 - (num_hashes - k) / num_hashes < threshold),
        default=-1,
    )
    # MinHashLSH needs at least two bands; extra bands never lose a pair.
    bands = min(num_hashes, max(2, worst + 1)) if num_hashes >= 2 else 1
    return bands, num_hashes // bands


def supports_banding(num_hashes: int, threshold: float) -> bool:
    # Two bands need two slots; threshold 0 reports nothing.
    return num_hashes >= 2 and threshold > 0.0


class LSHIndex:
    """Light wrapper storing signatures under document-position keys."""

    def __init__(self, *, num_hashes: int, threshold: float) -> None:
        self.num_hashes = num_hashes
        self.bands, self.rows = band_params(num_hashes, threshold)
        self.lsh = MinHashLSH(
            threshold=1.0 - threshold,  # similarity, unused with explicit params
            num_perm=num_hashes,
            params=(self.bands, self.rows),
        )
        self._stored: Dict[int, MinHash] = {}

    # --------------------------------------------------
    # Mutation
    # --------------------------------------------------

    def add(self, key: int, signature: Sequence[int]) -> None:
        """Add *signature* under *key* to the index."""
        mh = MinHash(num_perm=self.num_hashes, hashvalues=np.asarray(signature, dtype=np.uint64))
        self.lsh.insert(key, mh)
        self._stored[key] = mh

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def get_candidates(self, key: int) -> List[int]:
        """Return keys sharing at least one band with the signature under *key*."""
        return [k for k in self.lsh.query(self._stored[key]) if k != key]

    def candidate_pairs(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(i, j)`` candidate pairs, ``i < j``, in lexicographic order."""
        for i in sorted(self._stored):
            for j in sorted(k for k in self.get_candidates(i) if k > i):
                yield i, j

    def __len__(self) -> int:
        return len(self._stored)
