"""DupSlasher - MinHash near-duplicate detection for text documents.

DupSlasher turns every document into a small MinHash signature over hashed
word n-grams and reports the pairs whose estimated Jaccard distance falls
below a threshold:
- Deterministic tokenisation and n-gram feature hashing
- Seeded universal hash family (reproducible signatures)
- Ordered pairwise scan with optional recall-preserving LSH banding
- Flexible output formats (JSONL, TXT)

Quick Start:
    # CLI usage
    dupslasher scan data/ --output pairs.jsonl
    dupslasher demo

    # Python API
    from dupslasher import Deduplicator
    pairs = Deduplicator(ngram_size=3, num_hashes=13, threshold=0.3).process(docs)
"""

from .detector import __version__

# Re-export main API
from .detector import (
    Tokenizer,
    FeatureExtractor,
    MinHasher,
    DedupConfig,
    load_config,
    Deduplicator,
    DuplicatePair,
    find_duplicates,
    run_pipeline,
    ingest_files,
    create_writer,
)

__all__ = [
    "__version__",
    "Tokenizer",
    "FeatureExtractor",
    "MinHasher",
    "DedupConfig",
    "load_config",
    "Deduplicator",
    "DuplicatePair",
    "find_duplicates",
    "run_pipeline",
    "ingest_files",
    "create_writer",
]
