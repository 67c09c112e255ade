"""DupSlasher unified command-line interface.

Usage
-----
$ dupslasher scan input_data/ --output pairs.jsonl
$ dupslasher run config.yml
$ dupslasher demo

The *scan* command reads documents from files, directories or glob patterns,
computes MinHash signatures and reports every pair whose estimated Jaccard
distance is below ``--threshold``.

The *run* command does the same from a YAML configuration file::

    inputs: [data/]
    output: results/pairs.jsonl
    mode: line
    ngram_size: 3
    num_hashes: 13
    threshold: 0.3

The *demo* command runs the built-in sample corpus with the default settings
and prints the pairs it finds.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .detector.config import DedupConfig, load_config
from .detector.dedup import Deduplicator
from .detector.features import FEATURE_HASHES
from .detector.output import create_pair_record, create_writer
from .detector.pipeline import run_pipeline
from .detector.samples import SAMPLE_DOCUMENTS

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _add_dedup_args(p: argparse.ArgumentParser) -> None:
    defaults = DedupConfig()
    p.add_argument("--ngram", type=int, default=defaults.ngram_size,
                   help=f"Tokens per n-gram window (default: {defaults.ngram_size})")
    p.add_argument("--num-hashes", type=int, default=defaults.num_hashes,
                   help=f"Signature length (default: {defaults.num_hashes})")
    p.add_argument("--threshold", type=float, default=defaults.threshold,
                   help=f"Report pairs with distance below this (default: {defaults.threshold})")
    p.add_argument("--num-features", type=int, default=defaults.num_features,
                   help=f"Size of the feature hash space (default: {defaults.num_features})")
    p.add_argument("--seed", type=int, default=defaults.seed,
                   help=f"Hash family seed (default: {defaults.seed})")
    p.add_argument("--hash", dest="hash_name", choices=sorted(FEATURE_HASHES),
                   default=defaults.hash_name, help="N-gram feature hash")
    p.add_argument("--lsh", action="store_true",
                   help="Restrict the scan to LSH candidates (same pairs, fewer comparisons)")
    p.add_argument("--processes", type=int, default=defaults.processes,
                   help="Worker processes for signature computation")


def _config_from_args(args: argparse.Namespace) -> DedupConfig:
    return DedupConfig(
        ngram_size=args.ngram,
        num_hashes=args.num_hashes,
        threshold=args.threshold,
        num_features=args.num_features,
        seed=args.seed,
        hash_name=args.hash_name,
        use_lsh=args.lsh,
        processes=args.processes,
    )


def _save_stats(stats: dict, path: Path, stream=None) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2, default=str)
    print(f"💾 Detailed stats saved to {path}", file=stream or sys.stdout)


# -----------------------------------------------------------
# Commands
# -----------------------------------------------------------


def _cmd_scan(args: argparse.Namespace) -> None:
    stats = run_pipeline(
        input_paths=args.input,
        output_path=args.output,
        config=_config_from_args(args),
        mode=args.mode,
        output_format=args.format,
        include_text=not args.no_text,
        verbose=not args.quiet,
    )
    if args.save_stats:
        if args.output:
            _save_stats(stats, Path(args.output).parent / "dupslasher_full_stats.json")
        else:
            # the pair report owns stdout
            _save_stats(stats, Path.cwd() / "dupslasher_full_stats.json", stream=sys.stderr)


def _cmd_run(args: argparse.Namespace) -> None:
    cfg_path: Path = args.config.resolve()
    config, run = load_config(cfg_path)

    if "inputs" not in run:
        raise KeyError(f"{cfg_path} must define 'inputs'")
    inputs = run["inputs"]
    if isinstance(inputs, str):
        inputs = [inputs]
    base = cfg_path.parent
    inputs = [str((base / Path(p).expanduser())) for p in inputs]
    output = run.get("output")
    if output is not None:
        output = (base / Path(output).expanduser()).resolve()

    run_pipeline(
        input_paths=inputs,
        output_path=output,
        config=config,
        mode=str(run.get("mode", "line")),
        output_format=str(run.get("format", "auto")),
        verbose=not args.quiet,
    )


def _cmd_demo(args: argparse.Namespace) -> None:
    dedup = Deduplicator.from_config(_config_from_args(args))
    docs = [{"doc_id": i, "text": text} for i, text in enumerate(SAMPLE_DOCUMENTS)]
    writer = create_writer(None, format="txt")
    try:
        for pair in dedup.process(SAMPLE_DOCUMENTS):
            writer.write(create_pair_record(pair, docs))
    finally:
        writer.finalize()


# -----------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------


def main(argv: List[str] | None = None) -> None:  # noqa: D401 – simple
    parser = argparse.ArgumentParser(
        prog="dupslasher",
        description="DupSlasher - MinHash near-duplicate detection"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(required=True, dest="cmd")

    # scan
    p_scan = sub.add_parser("scan", help="Find near-duplicate documents in files")
    p_scan.add_argument("input", nargs="+", help="Input files, directories, or glob patterns")
    p_scan.add_argument("-o", "--output", help="Report path (default: print to stdout)")
    p_scan.add_argument("--format", default="auto", choices=["auto", "jsonl", "txt"],
                        help="Report format (default: auto-detect from extension)")
    p_scan.add_argument("--mode", default="line", choices=["line", "file"],
                        help="One document per line or per file (default: line)")
    p_scan.add_argument("--no-text", action="store_true",
                        help="Leave document texts out of the report")
    p_scan.add_argument("--save-stats", action="store_true",
                        help="Save detailed statistics to JSON")
    p_scan.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress progress output")
    _add_dedup_args(p_scan)
    p_scan.set_defaults(func=_cmd_scan)

    # run
    p_run = sub.add_parser("run", help="Run the scan configured by a YAML file")
    p_run.add_argument("config", type=Path, help="Path to YAML configuration file")
    p_run.add_argument("-q", "--quiet", action="store_true",
                       help="Suppress progress output")
    p_run.set_defaults(func=_cmd_run)

    # demo
    p_demo = sub.add_parser("demo", help="Scan the built-in sample corpus")
    _add_dedup_args(p_demo)
    p_demo.set_defaults(func=_cmd_demo)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        args.func(args)
    except (ValueError, FileNotFoundError, KeyError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    main()
