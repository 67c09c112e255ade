"""Output module for DupSlasher.

Writes duplicate-pair reports to:
- .jsonl (JSON Lines, optionally gzip-compressed)
- .txt (human-readable blocks)
and tracks run statistics.
"""
from __future__ import annotations

import gzip
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, TextIO, Union

import psutil

from .dedup import DuplicatePair


class PairWriter:
    """Base class for duplicate-pair writers."""

    format = ""

    def __init__(self, output_path: Optional[Path] = None):
        self.output_path = Path(output_path) if output_path is not None else None
        self.total_written = 0
        self._owns_stream = self.output_path is not None
        self.current_file: Optional[TextIO] = None

    def _open(self) -> TextIO:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        return open(self.output_path, 'w', encoding='utf-8')

    def _stream(self) -> TextIO:
        if self.current_file is None:
            self.current_file = self._open() if self._owns_stream else sys.stdout
        return self.current_file

    def write(self, record: Dict[str, Any]) -> None:
        """Write a single pair record."""
        raise NotImplementedError

    def finalize(self) -> Dict[str, Any]:
        """Close the output and return stats."""
        if self._owns_stream and self.current_file is not None:
            self.current_file.close()
        self.current_file = None
        return {
            'format': self.format,
            'total_records': self.total_written,
            'path': str(self.output_path) if self.output_path else None,
        }

    def __enter__(self) -> "PairWriter":
        return self

    def __exit__(self, *exc) -> None:
        self.finalize()


class JSONLPairWriter(PairWriter):
    """Writer for JSONL format."""

    format = 'jsonl'

    def __init__(self, output_path: Optional[Path] = None, compress: bool = False):
        super().__init__(output_path)
        self.compress = compress

    def _open(self) -> TextIO:
        if not self.compress:
            return super()._open()
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        return gzip.open(self.output_path, 'wt', encoding='utf-8')

    def write(self, record: Dict[str, Any]) -> None:
        f = self._stream()
        json.dump(record, f, ensure_ascii=False)
        f.write('\n')
        self.total_written += 1

    def finalize(self) -> Dict[str, Any]:
        stats = super().finalize()
        stats['compressed'] = self.compress
        return stats


class TextPairWriter(PairWriter):
    """Writer for the plain-text report.

    Each pair is written as::

        Duplicate pair (Jaccard: 0.923077):
         - <first document>
         - <second document>
    """

    format = 'txt'

    def write(self, record: Dict[str, Any]) -> None:
        f = self._stream()
        f.write(f"Duplicate pair (Jaccard: {record['similarity']:.6g}):\n")
        f.write(f" - {record.get('first_text', record['first'])}\n")
        f.write(f" - {record.get('second_text', record['second'])}\n\n")
        self.total_written += 1


def create_writer(
    output_path: Optional[Union[str, Path]] = None,
    format: str = "auto",
    **kwargs
) -> PairWriter:
    """
    Create the writer for *format*.

    Args:
        output_path: Output file path (None writes to stdout)
        format: Output format ('jsonl', 'txt', 'auto')
        **kwargs: Format-specific options
    """
    path = Path(output_path) if output_path is not None else None

    if format == "auto":
        if path is None:
            format = "txt"
        else:
            suffixes = [s.lower() for s in path.suffixes]
            if suffixes[-2:] in (['.jsonl', '.gz'], ['.json', '.gz']):
                kwargs.setdefault('compress', True)
                suffixes = suffixes[:-1]
            suffix = suffixes[-1] if suffixes else ''
            if suffix in ['.jsonl', '.json']:
                format = "jsonl"
            elif suffix == '.txt':
                format = "txt"
            else:
                raise ValueError(f"Cannot auto-detect format from suffix '{suffix}'")

    if format == "jsonl":
        return JSONLPairWriter(path, **kwargs)
    elif format == "txt":
        return TextPairWriter(path, **kwargs)
    else:
        raise ValueError(f"Unsupported format: {format}")


def create_pair_record(
    pair: DuplicatePair,
    documents: Optional[Sequence[Dict[str, Any]]] = None,
    include_text: bool = True,
) -> Dict[str, Any]:
    """
    Create a standardized record for a duplicate pair.

    Args:
        pair: The reported pair
        documents: Ingested documents (dicts with 'doc_id', 'text', 'source_file')
            indexed by position; adds ids, sources and texts when given
        include_text: Whether to embed both document texts
    """
    record: Dict[str, Any] = {
        'first': pair.first,
        'second': pair.second,
        'similarity': round(pair.similarity, 6),
        'distance': round(pair.distance, 6),
    }
    if documents is not None:
        for side, idx in (('first', pair.first), ('second', pair.second)):
            doc = documents[idx]
            record[f'{side}_id'] = doc.get('doc_id', idx)
            if doc.get('source_file') is not None:
                record[f'{side}_source'] = str(doc['source_file'])
            if include_text:
                record[f'{side}_text'] = doc['text']
    return record


class DedupStats:
    """Track run statistics."""

    def __init__(self):
        self.total_documents = 0
        self.empty_feature_documents = 0
        self.duplicate_pairs = 0
        self.source_file_stats: Dict[str, int] = {}
        self.char_total = 0
        self.start_time = time.time()
        self.end_time: Optional[float] = None

    def add_document(self, text: str, source_file: Optional[Path] = None,
                     num_features: Optional[int] = None) -> None:
        """Record an input document."""
        self.total_documents += 1
        self.char_total += len(text)
        if num_features == 0:
            self.empty_feature_documents += 1
        if source_file is not None:
            source_str = str(source_file)
            self.source_file_stats[source_str] = self.source_file_stats.get(source_str, 0) + 1

    def add_pairs(self, count: int) -> None:
        self.duplicate_pairs += count

    def finish(self) -> None:
        self.end_time = time.time()

    def get_summary(self) -> Dict[str, Any]:
        """Get run statistics summary."""
        elapsed = (self.end_time or time.time()) - self.start_time
        n = self.total_documents
        return {
            'documents': n,
            'empty_feature_documents': self.empty_feature_documents,
            'pairs_possible': n * (n - 1) // 2,
            'duplicate_pairs': self.duplicate_pairs,
            'source_files': len(self.source_file_stats),
            'source_file_distribution': dict(self.source_file_stats),
            'characters': self.char_total,
            'processing_time_seconds': elapsed,
            'documents_per_second': n / max(elapsed, 1e-9),
            'memory_mb': psutil.Process().memory_info().rss / 1024 / 1024,
        }

    def save_stats(self, output_path: Path) -> Path:
        """Save statistics next to *output_path* as JSON."""
        output_path = Path(output_path)
        stats_path = output_path.parent / f"{output_path.name.split('.')[0]}_stats.json"
        with open(stats_path, 'w', encoding='utf-8') as f:
            json.dump(self.get_summary(), f, indent=2, ensure_ascii=False)
        return stats_path
