"""Deduplication settings and YAML loading."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

import yaml  # type: ignore

from .features import DEFAULT_NUM_FEATURES, FEATURE_HASHES
from .minhash import DEFAULT_SEED

# Keys a YAML run file may carry besides the DedupConfig fields.
RUN_KEYS = {"inputs", "output", "format", "mode"}


def _as_int(key: str, value: Any) -> int:
    # 13.0 is accepted; 13.7, "13" and booleans are not
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"{key} must be an integer, got {value!r}")


@dataclass(frozen=True)
class DedupConfig:
    """Settings shared by every document of a batch.

    ``threshold`` is a Jaccard *distance*: pairs strictly below it are
    reported.
    """

    ngram_size: int = 3
    num_hashes: int = 13
    threshold: float = 0.3
    num_features: int = DEFAULT_NUM_FEATURES
    seed: int = DEFAULT_SEED
    hash_name: str = "murmur3"
    use_lsh: bool = False
    processes: int = 1

    def __post_init__(self) -> None:
        if self.ngram_size < 1:
            raise ValueError(f"ngram_size must be >= 1, got {self.ngram_size}")
        if self.num_hashes < 1:
            raise ValueError(f"num_hashes must be >= 1, got {self.num_hashes}")
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {self.threshold}")
        if self.num_features < 1:
            raise ValueError(f"num_features must be >= 1, got {self.num_features}")
        if self.hash_name not in FEATURE_HASHES:
            raise ValueError(f"Unknown feature hash {self.hash_name!r}")
        if self.processes < 1:
            raise ValueError(f"processes must be >= 1, got {self.processes}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DedupConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            default = getattr(cls, key)
            # bool before int: bool is an int subclass
            if isinstance(default, bool):
                if not isinstance(value, bool):
                    raise ValueError(f"{key} must be true or false, got {value!r}")
                kwargs[key] = value
            elif isinstance(default, int):
                kwargs[key] = _as_int(key, value)
            elif isinstance(default, float):
                kwargs[key] = float(value)
            else:
                kwargs[key] = str(value)
        return cls(**kwargs)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> Tuple[DedupConfig, Dict[str, Any]]:
    """Load a YAML run file.

    Returns the :class:`DedupConfig` and a dict with the remaining run keys
    (``inputs``, ``output``, ``format``, ``mode``).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open(encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    run = {k: cfg.pop(k) for k in list(cfg) if k in RUN_KEYS}
    # "ngram" is accepted as a short alias
    if "ngram" in cfg:
        cfg["ngram_size"] = cfg.pop("ngram")
    return DedupConfig.from_mapping(cfg), run
