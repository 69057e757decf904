"""Reduce the dataset to the patterns and codes visible at a threshold."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from .models import MarginalCode, Pattern
from .utils import pattern_sort_key, unique

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterResult:
    patterns: List[Pattern]
    marginals: List[MarginalCode]

    @property
    def is_empty(self) -> bool:
        return not self.patterns

    @property
    def codes(self) -> List[str]:
        return [m.code for m in self.marginals]


def filter_set_size(
    patterns: Sequence[Pattern],
    marginals: Sequence[MarginalCode],
    min_size: float = 100,
    remove_singletons: bool = False,
) -> FilterResult:
    """Filter patterns to those with at least ``min_size`` subjects.

    Parameters
    ----------
    patterns : sequence of Pattern
        Full dataset.
    marginals : sequence of MarginalCode
        Marginal counts for every code.
    min_size : float
        Inclusive lower bound on ``Pattern.count``.
    remove_singletons : bool
        Also drop patterns made of a single code.

    Returns
    -------
    FilterResult
        Surviving patterns, most frequent first, and the marginals of the
        codes they contain (input order kept).
    """
    kept = [
        p for p in patterns
        if p.count >= min_size and not (remove_singletons and p.size == 1)
    ]
    # sorted() is stable so equal counts keep dataset order
    kept = sorted(kept, key=pattern_sort_key)

    distinct_codes = set(unique([code for p in kept for code in p.codes]))
    kept_marginals = [m for m in marginals if m.code in distinct_codes]

    logger.debug(
        "filter min_size=%s remove_singletons=%s -> %d/%d patterns, %d codes",
        min_size, remove_singletons, len(kept), len(patterns), len(kept_marginals),
    )
    return FilterResult(patterns=kept, marginals=kept_marginals)


def complete_marginals(
    patterns: Sequence[Pattern],
    marginals: Sequence[MarginalCode],
) -> List[MarginalCode]:
    """Add a marginal for every pattern code the marginal data lacks.

    The added count is the number of subjects across the patterns that
    contain the code.
    """
    known = {m.code for m in marginals}
    missing: dict[str, int] = {}
    for p in patterns:
        for code in p.codes:
            if code not in known:
                missing[code] = missing.get(code, 0) + p.count
    if missing:
        logger.warning(
            "marginal data lacks %d pattern codes, deriving counts: %s",
            len(missing), ", ".join(sorted(missing)),
        )
    return list(marginals) + [MarginalCode(code, count) for code, count in missing.items()]


def initial_min_size(patterns: Sequence[Pattern], default_min_size: float) -> float:
    """Starting threshold: the default, lowered so at least two patterns show.

    When fewer than two patterns reach ``default_min_size`` the threshold
    drops to the second largest count.
    """
    sorted_counts = sorted((p.count for p in patterns), reverse=True)
    n_shown = sum(1 for c in sorted_counts if c >= default_min_size)
    if n_shown < 2 and len(sorted_counts) >= 2:
        return sorted_counts[1]
    return default_min_size
