"""Duplicate-detection pipeline for DupSlasher.

Integrates:
- File ingestion (multiple formats)
- MinHash signatures and the pairwise scan
- Pair reports in JSONL or text
- Run statistics
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .config import DedupConfig
from .dedup import Deduplicator, DuplicatePair
from .file_ingest import get_file_stats, ingest_files
from .minhash import HASH_PRIME
from .output import DedupStats, create_pair_record, create_writer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DedupPipeline:
    """Ingest documents, find duplicate pairs, and write the report."""

    def __init__(
        self,
        input_paths: Union[PathLike, List[PathLike]],
        output_path: Optional[PathLike] = None,
        config: Optional[DedupConfig] = None,
        mode: str = "line",
        output_format: str = "auto",
        include_text: bool = True,
        verbose: bool = True
    ):
        """
        Initialize the pipeline.

        Args:
            input_paths: Input files/directories/patterns
            output_path: Report path (None prints the report to stdout)
            config: Deduplication settings (defaults if None)
            mode: 'line' (document per line) or 'file' (document per file)
            output_format: 'jsonl', 'txt' or 'auto'
            include_text: Embed document texts in the report
            verbose: Print progress and a summary
        """
        self.input_paths = input_paths
        self.output_path = Path(output_path) if output_path is not None else None
        self.config = config or DedupConfig()
        self.mode = mode
        self.output_format = output_format
        self.include_text = include_text
        self.verbose = verbose
        self.stats = DedupStats()
        self.dedup = Deduplicator.from_config(self.config, show_progress=verbose)

    def run(self) -> Dict[str, Any]:
        """Run the complete pipeline."""
        if self.verbose:
            self._print_input_stats()

        documents = list(ingest_files(self.input_paths, mode=self.mode, show_progress=self.verbose))
        pairs = self._find_pairs(documents)

        writer = create_writer(self.output_path, format=self.output_format)
        try:
            for pair in pairs:
                writer.write(create_pair_record(pair, documents, self.include_text))
        finally:
            output_stats = writer.finalize()

        self.stats.finish()
        final_stats = self.stats.get_summary()
        final_stats['config'] = self.config.as_dict()
        final_stats['output_stats'] = output_stats

        if self.output_path is not None:
            self.stats.save_stats(self.output_path)
        if self.verbose:
            self._print_final_stats(final_stats)
        return final_stats

    def _find_pairs(self, documents: List[Dict[str, Any]]) -> List[DuplicatePair]:
        texts = [str(doc['text']) for doc in documents]
        signatures = self.dedup.signatures(texts)
        for doc, sig in zip(documents, signatures):
            # Only an empty feature set leaves every slot at the sentinel.
            empty = bool(np.all(sig == HASH_PRIME))
            self.stats.add_document(doc['text'], doc.get('source_file'), 0 if empty else None)
        pairs = list(self.dedup.iter_pairs(signatures))
        self.stats.add_pairs(len(pairs))
        if self.stats.empty_feature_documents > 1:
            logger.warning(
                "%d documents have no %d-gram features; they all compare as identical",
                self.stats.empty_feature_documents, self.config.ngram_size,
            )
        return pairs

    def _echo(self, message: str = "") -> None:
        # A report on stdout keeps stdout for the pairs alone.
        print(message, file=sys.stdout if self.output_path is not None else sys.stderr)

    def _print_input_stats(self) -> None:
        file_stats = get_file_stats(self.input_paths)
        self._echo(f"📁 Input: {file_stats['total_files']} files "
                   f"({file_stats['total_size_bytes'] / 1024 / 1024:.1f} MB)")
        self._echo(f"   - TXT: {file_stats['txt_files']}")
        self._echo(f"   - JSONL: {file_stats['jsonl_files']}")
        self._echo(f"   - HTML: {file_stats['html_files']}")
        self._echo(f"   - GZ: {file_stats['gz_files']}")
        self._echo()

    def _print_final_stats(self, stats: Dict[str, Any]) -> None:
        self._echo("\n" + "=" * 60)
        self._echo("📊 DUPSLASHER SCAN COMPLETE")
        self._echo("=" * 60)
        self._echo(f"⏱️  Processing Time: {stats['processing_time_seconds']:.2f}s")
        self._echo(f"💾 Memory: {stats['memory_mb']:.1f} MB")
        self._echo(f"📥 Documents: {stats['documents']:,} "
                   f"({stats['empty_feature_documents']:,} without features)")
        self._echo(f"🔄 Duplicate pairs: {stats['duplicate_pairs']:,} "
                   f"of {stats['pairs_possible']:,} possible")
        if self.output_path is not None:
            self._echo(f"📁 Report saved to: {self.output_path}")


def run_pipeline(
    input_paths: Union[PathLike, List[PathLike]],
    output_path: Optional[PathLike] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Convenience function to run the complete pipeline.

    Args:
        input_paths: Input files/directories/patterns
        output_path: Report path (None prints to stdout)
        **kwargs: Additional pipeline configuration

    Returns:
        Run statistics
    """
    pipeline = DedupPipeline(input_paths, output_path, **kwargs)
    return pipeline.run()
