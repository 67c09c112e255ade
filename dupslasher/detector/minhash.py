"""MinHash utilities for DupSlasher.

Signatures follow Spark ML's ``MinHashLSH``: a family of universal hash
functions ``h_i(x) = ((1 + x) * a_i + b_i) mod P`` over feature indices, with
the minimum value per function kept as slot *i* of the signature.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Prime modulus of the hash family; also the "no value seen" sentinel.
HASH_PRIME: int = 2038074743

# (1 + f) * a must stay below 2**64 with a < 2**31.
_MAX_FEATURE = 1 << 32

DEFAULT_SEED = 1

# Features hashed per block; bounds the (block, hashes) intermediate matrix.
_CHUNK_SIZE = 4096

# -----------------------------------------------------------
# Hash family
# -----------------------------------------------------------


def _hash_family(num_hashes: int, seed: int) -> tuple[np.ndarray, np.ndarray]:
    """Draw ``(a, b)`` coefficient arrays from ``RandomState(seed)`` (MT19937).

    All ``a`` values are drawn first (``[1, P-1]``), then all ``b`` values
    (``[0, P-1]``).
    """
    gen = np.random.RandomState(seed)
    a = gen.randint(1, HASH_PRIME, size=num_hashes, dtype=np.uint64)
    b = gen.randint(0, HASH_PRIME, size=num_hashes, dtype=np.uint64)
    a.setflags(write=False)
    b.setflags(write=False)
    return a, b


# -----------------------------------------------------------
# MinHasher
# -----------------------------------------------------------


class MinHasher:
    """Seeded family of universal hash functions producing MinHash signatures.

    Signatures are only comparable when produced by the same family, i.e. the
    same ``num_hashes`` and ``seed``.
    """

    def __init__(self, num_hashes: int, seed: int = DEFAULT_SEED) -> None:
        if num_hashes < 1:
            raise ValueError(f"num_hashes must be >= 1, got {num_hashes}")
        self.num_hashes = num_hashes
        self.seed = seed
        self._a, self._b = _hash_family(num_hashes, seed)
        logger.debug("Built hash family: num_hashes=%d seed=%d", num_hashes, seed)

    @property
    def coefficients(self) -> tuple[np.ndarray, np.ndarray]:
        """Read-only ``(a, b)`` coefficient arrays."""
        return self._a, self._b

    def empty_signature(self) -> np.ndarray:
        sig = np.full(self.num_hashes, HASH_PRIME, dtype=np.uint64)
        sig.setflags(write=False)
        return sig

    def compute_signature(self, feature_indices: Iterable[int]) -> np.ndarray:
        """Return the MinHash signature of a feature set.

        Slot *i* holds the smallest ``h_i(f)`` over the features, or
        :data:`HASH_PRIME` when the set is empty.
        """
        feats = np.fromiter(set(feature_indices), dtype=np.int64)
        if feats.size == 0:
            return self.empty_signature()
        if feats.min() < 0 or feats.max() >= _MAX_FEATURE:
            raise ValueError("Feature indices must lie in [0, 2**32)")

        x = feats.astype(np.uint64) + np.uint64(1)
        sig = np.full(self.num_hashes, HASH_PRIME, dtype=np.uint64)
        for start in range(0, x.size, _CHUNK_SIZE):
            # (block, hashes) matrix of hash values, folded into the running minimum.
            hashed = (np.outer(x[start:start + _CHUNK_SIZE], self._a) + self._b) % np.uint64(HASH_PRIME)
            np.minimum(sig, hashed.min(axis=0), out=sig)
        sig.setflags(write=False)
        return sig

    # --------------------------------------------------
    # Distance
    # --------------------------------------------------

    @staticmethod
    def jaccard_distance(sig_a: Sequence[int], sig_b: Sequence[int]) -> float:
        """Estimated Jaccard distance: the fraction of differing slots.

        Both signatures must come from the same hash family; unequal lengths
        raise :class:`ValueError`.
        """
        a = np.asarray(sig_a)
        b = np.asarray(sig_b)
        if a.shape != b.shape or a.ndim != 1:
            raise ValueError(f"Signature shapes differ: {a.shape} vs {b.shape}")
        if a.size == 0:
            raise ValueError("Signatures must not be empty")
        matches = int(np.count_nonzero(a == b))
        return 1.0 - matches / a.size

    @staticmethod
    def jaccard_similarity(sig_a: Sequence[int], sig_b: Sequence[int]) -> float:
        return 1.0 - MinHasher.jaccard_distance(sig_a, sig_b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MinHasher):
            return NotImplemented
        return (
            self.num_hashes == other.num_hashes
            and np.array_equal(self._a, other._a)
            and np.array_equal(self._b, other._b)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MinHasher(num_hashes={self.num_hashes}, seed={self.seed})"
