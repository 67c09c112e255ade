"""N-gram feature extraction for duplicate detection.

Each window of ``ngram_size`` consecutive tokens is joined into a canonical
string (every token followed by ``_``), hashed to 32 bits and folded into the
fixed feature space ``[0, num_features)``.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, Dict, Iterator, Set

import mmh3
import xxhash

from .tokenize import Tokenizer

WINDOW_SEPARATOR = "_"

# 262144 (2**18) matches the HashingTF default of Spark ML.
DEFAULT_NUM_FEATURES = 1 << 18

# -----------------------------------------------------------
# 32-bit hash functions (seed 0)
# -----------------------------------------------------------


def murmur3_32(value: str) -> int:
    """MurmurHash3 x86 32-bit of the UTF-8 bytes of *value*, unsigned."""
    return mmh3.hash(value, seed=0, signed=False)


def xxh32(value: str) -> int:
    return xxhash.xxh32_intdigest(value.encode("utf-8"), seed=0)


FEATURE_HASHES: Dict[str, Callable[[str], int]] = {
    "murmur3": murmur3_32,
    "xxh32": xxh32,
}


# -----------------------------------------------------------
# Extractor
# -----------------------------------------------------------


class FeatureExtractor:
    """Turn a document into its set of hashed n-gram feature indices."""

    def __init__(
        self,
        ngram_size: int,
        num_features: int = DEFAULT_NUM_FEATURES,
        *,
        tokenizer: Tokenizer | None = None,
        hash_name: str = "murmur3",
    ) -> None:
        if ngram_size < 1:
            raise ValueError(f"ngram_size must be >= 1, got {ngram_size}")
        if num_features < 1:
            raise ValueError(f"num_features must be >= 1, got {num_features}")
        if hash_name not in FEATURE_HASHES:
            raise ValueError(
                f"Unknown feature hash {hash_name!r}; choose from {sorted(FEATURE_HASHES)}"
            )
        self.ngram_size = ngram_size
        self.num_features = num_features
        self.tokenizer = tokenizer or Tokenizer()
        self.hash_name = hash_name

    def window_strings(self, text: str) -> Iterator[str]:
        """Yield the canonical string of every full window in *text*."""
        window: deque[str] = deque(maxlen=self.ngram_size)
        for token in self.tokenizer.tokens(text):
            window.append(token)
            if len(window) == self.ngram_size:
                yield "".join(tok + WINDOW_SEPARATOR for tok in window)

    def extract(self, text: str) -> Set[int]:
        """Return the feature set of *text*.

        Documents with fewer than ``ngram_size`` tokens give an empty set.
        """
        hash32 = FEATURE_HASHES[self.hash_name]
        return {hash32(s) % self.num_features for s in self.window_strings(text)}

    __call__ = extract

    def __repr__(self) -> str:
        return (
            f"FeatureExtractor(ngram_size={self.ngram_size}, "
            f"num_features={self.num_features}, hash_name={self.hash_name!r})"
        )
