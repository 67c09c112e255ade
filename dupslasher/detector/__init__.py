"""DupSlasher detector package.

Core public API lives here so external users can::

    from dupslasher.detector import Deduplicator
    pairs = Deduplicator(ngram_size=3, num_hashes=13, threshold=0.3).process(docs)

The building blocks are importable on their own:
    from dupslasher.detector.tokenize import Tokenizer
    from dupslasher.detector.features import FeatureExtractor
    from dupslasher.detector.minhash import MinHasher
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version


# Semantic version of the installed package
try:
    __version__: str = _pkg_version("dupslasher")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "0.1.0"


from .tokenize import Tokenizer, tokenize, NONALNUM
from .features import FeatureExtractor
from .minhash import MinHasher, HASH_PRIME
from .config import DedupConfig, load_config
from .dedup import Deduplicator, DuplicatePair, find_duplicates
from .file_ingest import ingest_files, get_file_stats
from .output import create_writer, create_pair_record, DedupStats
from .pipeline import run_pipeline

__all__ = [
    "__version__",
    "Tokenizer",
    "tokenize",
    "NONALNUM",
    "FeatureExtractor",
    "MinHasher",
    "HASH_PRIME",
    "DedupConfig",
    "load_config",
    "Deduplicator",
    "DuplicatePair",
    "find_duplicates",
    "ingest_files",
    "get_file_stats",
    "create_writer",
    "create_pair_record",
    "DedupStats",
    "run_pipeline",
]
