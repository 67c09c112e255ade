"""Parallel and LSH-banded scans must report exactly the pairs of the plain scan."""
from __future__ import annotations

import random
from typing import List

import pytest

from dupslasher.detector.dedup import Deduplicator, DuplicatePair
from dupslasher.detector.lsh_index import LSHIndex, band_params
from dupslasher.detector.samples import SAMPLE_DOCUMENTS


def _synthetic_corpus(seed: int = 42, n_docs: int = 30) -> List[str]:
    """Random documents where every 5th one lightly edits the previous one."""
    rng = random.Random(seed)
    vocab = [f"tok{i}" for i in range(500)]
    docs: List[str] = []
    for i in range(n_docs):
        if docs and i % 5 == 0:
            words = docs[-1].split()
            words[rng.randrange(len(words))] = rng.choice(vocab)
            docs.append(" ".join(words))
        else:
            docs.append(" ".join(rng.choices(vocab, k=rng.randint(100, 150))))
    return docs


@pytest.mark.parametrize("processes", [1, 4])
def test_parallel_equivalence(processes: int) -> None:
    docs = _synthetic_corpus()
    baseline = Deduplicator(3, 64, 0.3).process(docs)
    parallel = Deduplicator(3, 64, 0.3, processes=processes).process(docs)
    assert parallel == baseline
    found = {(p.first, p.second) for p in baseline}
    assert {(i - 1, i) for i in range(5, 30, 5)} <= found  # the edited copies


@pytest.mark.parametrize("threshold", [0.05, 0.3, 0.5, 0.9, 1.0])
@pytest.mark.parametrize("num_hashes", [2, 13, 64])
def test_lsh_equivalence(threshold: float, num_hashes: int) -> None:
    docs = _synthetic_corpus(seed=num_hashes) + SAMPLE_DOCUMENTS
    full = Deduplicator(3, num_hashes, threshold).process(docs)
    banded = Deduplicator(3, num_hashes, threshold, use_lsh=True).process(docs)
    assert banded == full


def test_lsh_when_only_identical_signatures_qualify() -> None:
    docs = [SAMPLE_DOCUMENTS[4], SAMPLE_DOCUMENTS[5], SAMPLE_DOCUMENTS[6]]
    expected = [DuplicatePair(0, 1, similarity=1.0, distance=0.0)]
    assert Deduplicator(3, 13, 0.05, use_lsh=True).process(docs) == expected
    assert Deduplicator(3, 2, 0.3, use_lsh=True).process(docs) == expected


def test_lsh_with_single_hash_falls_back_to_full_scan() -> None:
    docs = ["a b c d", "a b c d", "x y z w"]
    assert Deduplicator(3, 1, 0.5, use_lsh=True).process(docs) == \
        Deduplicator(3, 1, 0.5).process(docs)


@pytest.mark.parametrize(
    "num_hashes, threshold, expected",
    [(13, 0.3, (4, 3)), (13, 1.0, (13, 1)), (128, 0.2, (26, 4)),
     # no mismatch allowed still splits into the two bands MinHashLSH requires
     (10, 0.0, (2, 5)), (13, 0.05, (2, 6)), (2, 0.5, (2, 1))],
)
def test_band_params(num_hashes: int, threshold: float, expected) -> None:
    bands, rows = band_params(num_hashes, threshold)
    assert (bands, rows) == expected
    assert bands * rows <= num_hashes


def test_lsh_index_candidates() -> None:
    index = LSHIndex(num_hashes=4, threshold=0.75)  # 3 bands of 1 row
    index.add(0, [1, 2, 3, 4])
    index.add(1, [1, 9, 9, 9])
    index.add(2, [7, 8, 6, 10])
    assert len(index) == 3
    assert index.get_candidates(0) == [1]
    assert list(index.candidate_pairs()) == [(0, 1)]


def test_lsh_index_stores_minhasher_signatures() -> None:
    dedup = Deduplicator(3, 13, 0.3)
    sigs = dedup.signatures([SAMPLE_DOCUMENTS[4], SAMPLE_DOCUMENTS[6], SAMPLE_DOCUMENTS[5]])
    index = LSHIndex(num_hashes=13, threshold=0.3)
    for i, sig in enumerate(sigs):
        index.add(i, sig)
    assert (index.bands, index.rows) == (4, 3)
    assert list(index.candidate_pairs()) == [(0, 2)]
