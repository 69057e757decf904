"""Record types for upset plot input data and options."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

PATTERN_SEPARATOR = "-"
DEFAULT_MSG_LOC = "no_host_channel"
DEFAULT_MIN_SET_SIZE = 100


def _optional_float(value: Any) -> Optional[float]:
    """Return ``None`` for missing/NaN values, else a float."""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return value


@dataclass(frozen=True)
class Pattern:
    """One observed combination of codes and its aggregate statistics."""

    pattern: str
    size: int
    count: int
    point_est: float = float("nan")
    lower: Optional[float] = None
    upper: Optional[float] = None
    num_snp: int = 0

    def __post_init__(self) -> None:
        n_codes = len(self.codes)
        if n_codes != self.size:
            raise ValueError(
                f"Pattern {self.pattern!r} has {n_codes} codes but size={self.size}"
            )
        if (self.lower is None) != (self.upper is None):
            raise ValueError(
                f"Pattern {self.pattern!r} must have both or neither interval bounds"
            )

    @property
    def codes(self) -> List[str]:
        return self.pattern.split(PATTERN_SEPARATOR)

    @property
    def has_null_interval(self) -> bool:
        return self.lower is None or self.upper is None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Pattern":
        """Build from a host record (``pointEst`` or ``point_est`` accepted)."""
        point_est = _optional_float(record.get("pointEst", record.get("point_est")))
        pattern = str(record["pattern"])
        size = record.get("size")
        return cls(
            pattern=pattern,
            size=int(size) if size is not None else len(pattern.split(PATTERN_SEPARATOR)),
            count=int(record["count"]),
            point_est=point_est if point_est is not None else float("nan"),
            lower=_optional_float(record.get("lower")),
            upper=_optional_float(record.get("upper")),
            num_snp=int(record.get("num_snp", 0) or 0),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "size": self.size,
            "count": self.count,
            "pointEst": self.point_est,
            "lower": self.lower,
            "upper": self.upper,
            "num_snp": self.num_snp,
        }


@dataclass(frozen=True)
class MarginalCode:
    """Per-code aggregate count, independent of pattern membership."""

    code: str
    count: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "MarginalCode":
        return cls(code=str(record["code"]), count=int(record["count"]))


@dataclass(frozen=True)
class Margin:
    top: float = 20
    right: float = 50
    bottom: float = 70
    left: float = 50


@dataclass
class UpsetOptions:
    """Options record supplied by the host alongside the pattern data.

    ``colors`` holds named colour roles (``light_blue``, ``dark_red``,
    ``dark_grey``, ``med_grey``, ``green``); missing roles fall back to the
    theme palette.
    """

    colors: Dict[str, str] = field(default_factory=dict)
    code_to_color: Dict[str, str] = field(default_factory=dict)
    min_set_size: float = DEFAULT_MIN_SET_SIZE
    marginal_data: List[MarginalCode] = field(default_factory=list)
    msg_loc: str = DEFAULT_MSG_LOC

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> "UpsetOptions":
        options = options or {}
        marginals = options.get("marginalData", options.get("marginal_data")) or []
        return cls(
            colors=dict(options.get("colors") or {}),
            code_to_color=dict(options.get("code_to_color") or {}),
            min_set_size=options.get("min_set_size", DEFAULT_MIN_SET_SIZE),
            marginal_data=[
                m if isinstance(m, MarginalCode) else MarginalCode.from_record(m)
                for m in marginals
            ],
            msg_loc=options.get("msg_loc") or DEFAULT_MSG_LOC,
        )


def has_risk_data(patterns: Sequence[Pattern]) -> bool:
    """True when at least one pattern carries relative-risk information.

    Patterns built only from SNP counts have ``num_snp >= count`` and no
    meaningful interval, so the risk band is dropped for such datasets.
    """
    return any(p.num_snp < p.count for p in patterns)
