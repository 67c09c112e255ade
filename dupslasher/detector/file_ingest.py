"""File ingestion for DupSlasher.

Supports reading documents from:
- .txt, .jsonl, .html files
- .gz compressed files (JSONL or plain text inside)
- Directories (recursive) and glob patterns

In ``line`` mode every non-blank line of a text file is one document; in
``file`` mode each file is one document.  JSONL records are always one
document each.
"""
from __future__ import annotations

import glob
import gzip
import json
import logging
from pathlib import Path
from typing import Dict, Generator, Iterable, List, Optional, Union

import chardet
from bs4 import BeautifulSoup
from tqdm import tqdm

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SUPPORTED_EXTENSIONS = {'.txt', '.jsonl', '.html', '.htm', '.gz'}
TEXT_FIELDS = ['text', 'content', 'body', 'message', 'document']
MODES = ('line', 'file')


def detect_encoding(file_path: Path, sample_size: int = 8192) -> str:
    """Detect file encoding using chardet."""
    with open(file_path, 'rb') as f:
        raw_data = f.read(sample_size)
    result = chardet.detect(raw_data)
    return result.get('encoding') or 'utf-8'


def _split(text: str, mode: str) -> Generator[str, None, None]:
    if mode == 'file':
        if text.strip():
            yield text
        return
    for line in text.splitlines():
        line = line.strip()
        if line:
            yield line


def _jsonl_texts(lines: Iterable[str], source: Path,
                 text_fields: List[str]) -> Generator[str, None, None]:
    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON at %s:%d: %s", source, line_num, e)
            continue
        if not isinstance(obj, dict):
            logger.warning("Skipping non-object JSON at %s:%d", source, line_num)
            continue
        text_parts = [str(obj[field]) for field in text_fields if obj.get(field)]
        if text_parts:
            yield " ".join(text_parts)


def read_text_file(file_path: Path, mode: str = 'line',
                   encoding: Optional[str] = None) -> Generator[str, None, None]:
    """Read a text file as one document per line or per file."""
    if encoding is None:
        encoding = detect_encoding(file_path)
    with open(file_path, 'r', encoding=encoding, errors='replace') as f:
        yield from _split(f.read(), mode)


def read_jsonl_file(file_path: Path,
                    text_fields: Optional[List[str]] = None) -> Generator[str, None, None]:
    """Read a JSONL file and join the text of the known fields of each record."""
    encoding = detect_encoding(file_path)
    with open(file_path, 'r', encoding=encoding, errors='replace') as f:
        yield from _jsonl_texts(f, file_path, text_fields or TEXT_FIELDS)


def read_html_file(file_path: Path, encoding: Optional[str] = None) -> Generator[str, None, None]:
    """Read an HTML file and extract its visible text as a single document."""
    if encoding is None:
        encoding = detect_encoding(file_path)
    with open(file_path, 'r', encoding=encoding, errors='replace') as f:
        content = f.read()

    soup = BeautifulSoup(content, 'lxml')
    for script in soup(["script", "style"]):
        script.decompose()

    lines = (line.strip() for line in soup.get_text().splitlines())
    text = ' '.join(line for line in lines if line)
    if text:
        yield text


def read_gz_file(file_path: Path, mode: str = 'line',
                 text_fields: Optional[List[str]] = None) -> Generator[str, None, None]:
    """Read a gzipped file, auto-detecting JSONL by its first line."""
    with gzip.open(file_path, 'rt', encoding='utf-8', errors='replace') as f:
        content = f.read()
    first_line = content.lstrip().split('\n', 1)[0]
    if first_line.startswith('{'):
        yield from _jsonl_texts(content.splitlines(), file_path, text_fields or TEXT_FIELDS)
    else:
        yield from _split(content, mode)


def collect_files(paths: Union[PathLike, List[PathLike]], recursive: bool = True) -> List[Path]:
    """Expand files, directories and glob patterns into supported files, sorted."""
    if isinstance(paths, (str, Path)):
        paths = [paths]

    all_files: List[Path] = []
    for path in paths:
        path = Path(path)
        if '*' in str(path) or '?' in str(path):
            all_files.extend(Path(p) for p in glob.glob(str(path), recursive=recursive))
        elif path.is_file():
            all_files.append(path)
        elif path.is_dir():
            all_files.extend(path.rglob('*') if recursive else path.glob('*'))
        else:
            raise FileNotFoundError(path)

    return sorted(f for f in set(all_files)
                  if f.is_file() and f.suffix.lower() in SUPPORTED_EXTENSIONS)


def _read_file(file_path: Path, mode: str) -> Generator[str, None, None]:
    suffix = file_path.suffix.lower()
    if suffix == '.txt':
        yield from read_text_file(file_path, mode)
    elif suffix == '.jsonl':
        yield from read_jsonl_file(file_path)
    elif suffix in {'.html', '.htm'}:
        yield from read_html_file(file_path)
    elif suffix == '.gz':
        yield from read_gz_file(file_path, mode)


def ingest_files(
    paths: Union[PathLike, List[PathLike]],
    mode: str = 'line',
    recursive: bool = True,
    show_progress: bool = False
) -> Generator[Dict[str, Union[str, Path]], None, None]:
    """
    Ingest documents from paths (files, directories, or glob patterns).

    Args:
        paths: Single path, list of paths, or glob patterns
        mode: 'line' (one document per line) or 'file' (one per file)
        recursive: Whether to search directories recursively
        show_progress: Whether to show a progress bar

    Yields:
        Dict with keys: 'text', 'source_file', 'doc_id'
    """
    if mode not in MODES:
        raise ValueError(f"Unsupported mode: {mode!r} (choose from {MODES})")

    files: Iterable[Path] = collect_files(paths, recursive)
    if not files:
        logger.warning("No supported files found in %s", paths)
        return

    if show_progress:
        files = tqdm(files, desc="Reading files")

    doc_id = 0
    for file_path in files:
        try:
            for text in _read_file(file_path, mode):
                yield {
                    'text': text,
                    'source_file': file_path,
                    'doc_id': f"doc_{doc_id}"
                }
                doc_id += 1
        except (OSError, UnicodeDecodeError, LookupError) as e:
            logger.warning("Error processing %s: %s", file_path, e)


def get_file_stats(paths: Union[PathLike, List[PathLike]]) -> Dict[str, int]:
    """Get statistics about files that would be processed."""
    stats = {
        'total_files': 0,
        'txt_files': 0,
        'jsonl_files': 0,
        'html_files': 0,
        'gz_files': 0,
        'total_size_bytes': 0
    }

    for file_path in collect_files(paths):
        suffix = file_path.suffix.lower()
        stats['total_files'] += 1
        stats['total_size_bytes'] += file_path.stat().st_size

        if suffix == '.txt':
            stats['txt_files'] += 1
        elif suffix == '.jsonl':
            stats['jsonl_files'] += 1
        elif suffix in {'.html', '.htm'}:
            stats['html_files'] += 1
        elif suffix == '.gz':
            stats['gz_files'] += 1

    return stats
