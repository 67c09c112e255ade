"""Basic sanity tests for DupSlasher."""
from __future__ import annotations

import random

import numpy as np
import pytest
import xxhash

from dupslasher.detector.features import FeatureExtractor, murmur3_32
from dupslasher.detector import minhash
from dupslasher.detector.minhash import HASH_PRIME, MinHasher
from dupslasher.detector.tokenize import DELIMITER_TABLE, NONALNUM, Tokenizer, tokenize

# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


def test_tokenize_skips_delimiter_runs() -> None:
    assert list(tokenize("The quick,  brown fox!!")) == ["The", "quick", "brown", "fox"]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", []),
        ("|||", []),
        ("||| a", ["a"]),
        ("a|||", ["a"]),
        ("AAAA,,,,,,|| ||", ["AAAA"]),
        ("RFC 2606", ["RFC", "2606"]),
    ],
)
def test_tokenize_edge_cases(text: str, expected: list[str]) -> None:
    assert list(tokenize(text)) == expected


def test_non_ascii_characters_are_delimiters() -> None:
    # Matches splitting the UTF-8 bytes: every byte of "Š" / "ć" is >= 0x80.
    assert list(tokenize("Davor Šuker, Luka Modrić")) == ["Davor", "uker", "Luka", "Modri"]
    assert list(tokenize("Davor Šuker".encode("utf-8"))) == ["Davor", "uker"]


def test_delimiter_table() -> None:
    assert len(DELIMITER_TABLE) == 256
    assert " " in NONALNUM and "_" in NONALNUM
    assert "a" not in NONALNUM and "Z" not in NONALNUM and "7" not in NONALNUM
    assert len(NONALNUM) == 256 - 62


def test_token_stream_restarts() -> None:
    stream = Tokenizer().split("one two three")
    assert list(stream) == ["one", "two", "three"]
    assert list(stream) == ["one", "two", "three"]
    it = iter(stream)
    assert next(it) == "one"
    assert list(stream) == ["one", "two", "three"]  # fresh iterator from the start
    assert next(it) == "two"


def test_custom_delimiters() -> None:
    tok = Tokenizer(delimiters=" ,")
    assert list(tok.tokens("a,b c-d")) == ["a", "b", "c-d"]
    with pytest.raises(ValueError):
        Tokenizer(delimiters=["ab"])


# ---------------------------------------------------------------------------
# Feature extraction
# ---------------------------------------------------------------------------


def test_murmur3_known_value() -> None:
    assert murmur3_32("foo") == 4138058784


def test_window_strings_are_canonical() -> None:
    ext = FeatureExtractor(3)
    assert list(ext.window_strings("a b, c d")) == ["a_b_c_", "b_c_d_"]


def test_features_hash_canonical_windows() -> None:
    ext = FeatureExtractor(3, num_features=1024)
    expected = {murmur3_32("a_b_c_") % 1024, murmur3_32("b_c_d_") % 1024}
    assert ext.extract("a b c d") == expected


def test_xxh32_feature_hash() -> None:
    ext = FeatureExtractor(2, num_features=4096, hash_name="xxh32")
    assert ext.extract("hello world") == {xxhash.xxh32_intdigest(b"hello_world_") % 4096}


def test_short_document_has_no_features() -> None:
    ext = FeatureExtractor(3)
    assert ext.extract("two words") == set()
    assert ext.extract("") == set()
    assert ext.extract("!!! ??? ...") == set()


def test_repeated_windows_collapse() -> None:
    ext = FeatureExtractor(3)
    # windows: abc, bca, cab, abc
    assert ext.extract("a b c a b c") == ext.extract("a b c a b") | ext.extract("c a b")
    assert len(ext.extract("a b c a b c")) <= 3


def test_unigram_features() -> None:
    ext = FeatureExtractor(1, num_features=1 << 18)
    assert ext.extract("x y x") == {murmur3_32("x_") % (1 << 18), murmur3_32("y_") % (1 << 18)}


@pytest.mark.parametrize("kwargs", [{"ngram_size": 0}, {"ngram_size": 3, "num_features": 0},
                                    {"ngram_size": 3, "hash_name": "md5"}])
def test_feature_extractor_rejects_bad_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        FeatureExtractor(**kwargs)


# ---------------------------------------------------------------------------
# MinHash
# ---------------------------------------------------------------------------


def test_hash_family_is_seeded() -> None:
    a1, b1 = MinHasher(13, seed=1).coefficients
    a2, b2 = MinHasher(13, seed=1).coefficients
    assert np.array_equal(a1, a2) and np.array_equal(b1, b2)
    assert MinHasher(13, seed=1) == MinHasher(13, seed=1)
    assert MinHasher(13, seed=1) != MinHasher(13, seed=2)


def test_hash_family_ranges() -> None:
    a, b = MinHasher(500, seed=3).coefficients
    assert a.min() >= 1 and a.max() <= HASH_PRIME - 1
    assert b.min() >= 0 and b.max() <= HASH_PRIME - 1
    assert not a.flags.writeable and not b.flags.writeable


def test_signature_matches_formula() -> None:
    hasher = MinHasher(8, seed=5)
    a, b = hasher.coefficients
    feats = {0, 17, 262143, (1 << 32) - 1}
    expected = [
        min(((1 + f) * int(a[i]) + int(b[i])) % HASH_PRIME for f in feats)
        for i in range(8)
    ]
    assert hasher.compute_signature(feats).tolist() == expected


def test_signature_blocks_fold_into_running_minimum(monkeypatch) -> None:
    hasher = MinHasher(16, seed=4)
    feats = set(random.Random(3).sample(range(1 << 18), 500))
    whole = hasher.compute_signature(feats)
    monkeypatch.setattr(minhash, "_CHUNK_SIZE", 7)
    assert hasher.compute_signature(feats).tolist() == whole.tolist()
    a, b = hasher.coefficients
    assert whole.tolist() == [
        min(((1 + f) * int(a[i]) + int(b[i])) % HASH_PRIME for f in feats) for i in range(16)
    ]


def test_empty_signature_is_sentinel() -> None:
    hasher = MinHasher(13)
    sig = hasher.compute_signature(set())
    assert sig.tolist() == [HASH_PRIME] * 13
    assert MinHasher.jaccard_distance(sig, hasher.compute_signature([])) == 0.0


def test_signature_is_deterministic_and_read_only() -> None:
    hasher = MinHasher(13)
    feats = [5, 1, 9, 1]
    sig = hasher.compute_signature(feats)
    assert np.array_equal(sig, hasher.compute_signature(reversed(feats)))
    assert np.array_equal(sig, MinHasher(13).compute_signature(set(feats)))
    assert not sig.flags.writeable


def test_signature_rejects_out_of_range_features() -> None:
    with pytest.raises(ValueError):
        MinHasher(4).compute_signature({-1})
    with pytest.raises(ValueError):
        MinHasher(4).compute_signature({1 << 32})


def test_jaccard_distance_counts_mismatches() -> None:
    assert MinHasher.jaccard_distance([1, 2, 3, 4], [1, 2, 0, 0]) == 0.5
    assert MinHasher.jaccard_distance([1, 2], [3, 4]) == 1.0
    assert MinHasher.jaccard_similarity([1, 2, 3, 4], [1, 2, 3, 0]) == 0.75


def test_jaccard_distance_rejects_unequal_lengths() -> None:
    with pytest.raises(ValueError):
        MinHasher.jaccard_distance([1, 2, 3], [1, 2])
    with pytest.raises(ValueError):
        MinHasher.jaccard_distance([], [])


def test_disjoint_sets_never_match() -> None:
    # h_i is injective on features below P, so disjoint sets give disjoint minima.
    hasher = MinHasher(64)
    sig_a = hasher.compute_signature(range(0, 50))
    sig_b = hasher.compute_signature(range(50, 100))
    assert MinHasher.jaccard_distance(sig_a, sig_b) == 1.0


def test_minhash_collision() -> None:
    rng = random.Random(0)
    feats = rng.sample(range(1 << 18), 200)
    hasher = MinHasher(128)
    sig_a = hasher.compute_signature(feats[:100])
    sig_b = hasher.compute_signature(feats[100:])
    assert MinHasher.jaccard_distance(sig_a, sig_b) == 1.0


def test_more_hashes_reduce_estimator_error() -> None:
    rng = random.Random(7)
    feats = rng.sample(range(1 << 18), 150)
    set_a, set_b = feats[:100], feats[50:]
    true_sim = 50 / 150

    def squared_errors(num_hashes: int) -> list[float]:
        errs = []
        for seed in range(30):
            hasher = MinHasher(num_hashes, seed=seed)
            est = MinHasher.jaccard_similarity(
                hasher.compute_signature(set_a), hasher.compute_signature(set_b)
            )
            errs.append((est - true_sim) ** 2)
        return errs

    mse_small = float(np.mean(squared_errors(16)))
    mse_large = float(np.mean(squared_errors(256)))
    assert mse_large < mse_small
    assert mse_large < 0.01
