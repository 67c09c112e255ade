"""Property-based tokenizer, feature and distance tests (Hypothesis)."""
from __future__ import annotations

from typing import List, Set

import pytest

hyp = pytest.importorskip("hypothesis")

import hypothesis.strategies as st  # type: ignore
from hypothesis import given, settings  # type: ignore

from dupslasher.detector.features import FeatureExtractor
from dupslasher.detector.minhash import MinHasher
from dupslasher.detector.tokenize import Tokenizer

TOKENIZER = Tokenizer()
HASHER = MinHasher(32, seed=11)

# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


@given(text=st.text())
def test_tokens_never_empty_and_keep_order(text: str) -> None:
    tokens = list(TOKENIZER.tokens(text))
    assert all(tokens)
    assert all(not TOKENIZER.is_delimiter(ch) for tok in tokens for ch in tok)
    kept = "".join(ch for ch in text if not TOKENIZER.is_delimiter(ch))
    assert "".join(tokens) == kept
    assert " ".join(tokens).split(" ") == tokens or not tokens


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------


@given(text=st.text(alphabet=st.sampled_from("ab c,d"), max_size=80),
       n=st.integers(1, 4), m=st.integers(1, 64))
def test_features_within_space(text: str, n: int, m: int) -> None:
    ext = FeatureExtractor(n, num_features=m)
    feats = ext.extract(text)
    assert all(0 <= f < m for f in feats)
    if len(list(TOKENIZER.tokens(text))) < n:
        assert feats == set()


# ---------------------------------------------------------------------------
# Jaccard distance via MinHash
# ---------------------------------------------------------------------------

_feature_sets = st.sets(st.integers(min_value=0, max_value=(1 << 18) - 1), max_size=40)


@given(feats=_feature_sets)
def test_distance_reflexive(feats: Set[int]) -> None:
    sig = HASHER.compute_signature(feats)
    assert MinHasher.jaccard_distance(sig, sig) == 0.0


@given(a=_feature_sets, b=_feature_sets)
def test_distance_symmetric_and_bounded(a: Set[int], b: Set[int]) -> None:
    sig_a = HASHER.compute_signature(a)
    sig_b = HASHER.compute_signature(b)
    d = MinHasher.jaccard_distance(sig_a, sig_b)
    assert d == MinHasher.jaccard_distance(sig_b, sig_a)
    assert 0.0 <= d <= 1.0


@given(a=_feature_sets, b=_feature_sets)
def test_signature_of_union_is_slotwise_min(a: Set[int], b: Set[int]) -> None:
    union = HASHER.compute_signature(a | b).tolist()
    expected: List[int] = [min(x, y) for x, y in zip(HASHER.compute_signature(a).tolist(),
                                                     HASHER.compute_signature(b).tolist())]
    assert union == expected


@settings(max_examples=25)
@given(t1=st.floats(0.0, 1.0), t2=st.floats(0.0, 1.0))
def test_threshold_monotone(t1: float, t2: float) -> None:
    if t2 <= t1:
        t1, t2 = t2, t1
    sig_a = HASHER.compute_signature(range(0, 60))
    sig_b = HASHER.compute_signature(range(20, 80))
    d = MinHasher.jaccard_distance(sig_a, sig_b)
    # reported under the tighter threshold implies reported under the looser one
    assert (d < t1) <= (d < t2)
