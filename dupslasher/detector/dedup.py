"""Near-duplicate detection over a batch of documents.

Every document is reduced to a MinHash signature; every pair of signatures is
then compared and pairs whose estimated Jaccard distance falls below the
threshold are reported.  The pairwise scan is quadratic in the number of
documents, so it suits small to medium batches.  With ``use_lsh`` the scan is
restricted to LSH candidates, using band parameters that keep the reported
pairs identical to the full scan.
"""
from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from .config import DedupConfig
from .features import DEFAULT_NUM_FEATURES, FeatureExtractor
from .lsh_index import LSHIndex, supports_banding
from .minhash import DEFAULT_SEED, MinHasher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicatePair:
    """One reported pair: document positions and estimated similarity."""

    first: int
    second: int
    similarity: float
    distance: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _signature_for(extractor: FeatureExtractor, hasher: MinHasher, text: str) -> np.ndarray:
    return hasher.compute_signature(extractor.extract(text))


# -----------------------------------------------------------
# Deduplicator
# -----------------------------------------------------------


class Deduplicator:
    """Find near-duplicate pairs in a batch of documents."""

    def __init__(
        self,
        ngram_size: int,
        num_hashes: int,
        threshold: float,
        num_features: int = DEFAULT_NUM_FEATURES,
        *,
        seed: int = DEFAULT_SEED,
        hash_name: str = "murmur3",
        use_lsh: bool = False,
        processes: int = 1,
        show_progress: bool = False,
    ) -> None:
        # Validates every setting in one place.
        self.config = DedupConfig(
            ngram_size=ngram_size,
            num_hashes=num_hashes,
            threshold=threshold,
            num_features=num_features,
            seed=seed,
            hash_name=hash_name,
            use_lsh=use_lsh,
            processes=processes,
        )
        self.threshold = threshold
        self.extractor = FeatureExtractor(ngram_size, num_features, hash_name=hash_name)
        self.hasher = MinHasher(num_hashes, seed=seed)
        self.use_lsh = use_lsh
        self.processes = processes
        self.show_progress = show_progress

    @classmethod
    def from_config(cls, config: DedupConfig, *, show_progress: bool = False) -> "Deduplicator":
        return cls(
            config.ngram_size,
            config.num_hashes,
            config.threshold,
            config.num_features,
            seed=config.seed,
            hash_name=config.hash_name,
            use_lsh=config.use_lsh,
            processes=config.processes,
            show_progress=show_progress,
        )

    # --------------------------------------------------
    # Signatures
    # --------------------------------------------------

    def signature(self, text: str) -> np.ndarray:
        return _signature_for(self.extractor, self.hasher, text)

    def signatures(self, documents: Sequence[str]) -> List[np.ndarray]:
        """Return one signature per document, in document order."""
        work = partial(_signature_for, self.extractor, self.hasher)
        if self.processes > 1 and len(documents) > 1:
            chunksize = max(1, len(documents) // (self.processes * 4))
            with ProcessPoolExecutor(max_workers=self.processes) as pool:
                results: Iterable[np.ndarray] = pool.map(work, documents, chunksize=chunksize)
                return list(self._progress(results, len(documents), "Signatures"))
        return [work(doc) for doc in self._progress(documents, len(documents), "Signatures")]

    # --------------------------------------------------
    # Pairwise scan
    # --------------------------------------------------

    def candidate_pairs(self, signatures: Sequence[np.ndarray]) -> Iterator[Tuple[int, int]]:
        """Yield the ``(i, j)`` pairs to compare, ``i < j``, in lexicographic order."""
        n = len(signatures)
        if self.use_lsh and supports_banding(self.hasher.num_hashes, self.threshold):
            index = LSHIndex(num_hashes=self.hasher.num_hashes, threshold=self.threshold)
            for i, sig in enumerate(signatures):
                index.add(i, sig)
            logger.debug("LSH banding: %d bands x %d rows", index.bands, index.rows)
            yield from index.candidate_pairs()
            return
        for i in range(n):
            for j in range(i + 1, n):
                yield i, j

    def iter_pairs(self, signatures: Sequence[np.ndarray]) -> Iterator[DuplicatePair]:
        """Yield every pair whose estimated distance is below the threshold."""
        compared = 0
        for i, j in self.candidate_pairs(signatures):
            compared += 1
            dist = MinHasher.jaccard_distance(signatures[i], signatures[j])
            if dist < self.threshold:
                yield DuplicatePair(first=i, second=j, similarity=1.0 - dist, distance=dist)
        logger.debug("Compared %d pairs across %d documents", compared, len(signatures))

    def process(self, documents: Sequence[str]) -> List[DuplicatePair]:
        """Return duplicate pairs of *documents* ordered by ``(first, second)``."""
        documents = list(documents)
        sigs = self.signatures(documents)
        pairs = list(self.iter_pairs(sigs))
        logger.info("Found %d duplicate pairs among %d documents", len(pairs), len(documents))
        return pairs

    # --------------------------------------------------
    # Internal
    # --------------------------------------------------

    def _progress(self, items: Iterable, total: int, desc: str) -> Iterable:
        if self.show_progress:
            return tqdm(items, total=total, desc=desc)
        return items


def find_duplicates(
    documents: Sequence[str],
    config: Optional[DedupConfig] = None,
    *,
    show_progress: bool = False,
    **kwargs: Any,
) -> List[DuplicatePair]:
    """
    Convenience function: build a :class:`Deduplicator` and process *documents*.

    Args:
        documents: Texts to compare
        config: Settings (defaults to :class:`DedupConfig` defaults)
        show_progress: Whether to show a progress bar
        **kwargs: Overrides for individual ``DedupConfig`` fields

    Returns:
        Duplicate pairs in ``(first, second)`` order
    """
    base = (config or DedupConfig()).as_dict()
    base.update(kwargs)
    merged = DedupConfig.from_mapping(base)
    return Deduplicator.from_config(merged, show_progress=show_progress).process(documents)
