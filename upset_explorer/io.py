"""Data loading utilities for upset plots.

Handles CSV, JSON and JSONL pattern/marginal tables and converts DataFrames
into typed records.
"""

from __future__ import annotations

import logging
import os
from typing import List

import pandas as pd

from .models import MarginalCode, Pattern

logger = logging.getLogger(__name__)

PATTERN_COLUMNS = ("pattern", "count")
# codes like "401" must stay strings
TEXT_DTYPES = {"pattern": str, "code": str}
MARGINAL_COLUMNS = ("code", "count")


def read_table(path: str) -> pd.DataFrame:
    """Read a CSV, JSON (records) or JSONL file into a DataFrame.

    Parameters
    ----------
    path : str
        File path; the format is chosen from the extension.

    Returns
    -------
    pd.DataFrame
    """
    ext = os.path.splitext(path)[1].lower()
    if ext == ".jsonl":
        return pd.read_json(path, orient="records", lines=True, dtype=TEXT_DTYPES)
    if ext == ".json":
        return pd.read_json(path, orient="records", dtype=TEXT_DTYPES)
    if ext in (".csv", ".txt"):
        return pd.read_csv(path, dtype=TEXT_DTYPES)
    if ext == ".tsv":
        return pd.read_csv(path, sep="\t", dtype=TEXT_DTYPES)
    raise ValueError(f"Unsupported table format '{ext}' for {path}")


def _require_columns(df: pd.DataFrame, columns, what: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{what} table is missing columns: {', '.join(missing)}")


def patterns_from_frame(df: pd.DataFrame) -> List[Pattern]:
    """Convert a pattern table into :class:`Pattern` records.

    Rows that fail validation (code count not matching ``size``, a single
    interval bound) are skipped with a warning.

    Parameters
    ----------
    df : pd.DataFrame
        Columns ``pattern`` and ``count`` are required; ``size``,
        ``pointEst``, ``lower``, ``upper`` and ``num_snp`` are optional.

    Returns
    -------
    list of Pattern
    """
    _require_columns(df, PATTERN_COLUMNS, "Pattern")
    df = df.astype(object).where(pd.notna(df), None)

    patterns: List[Pattern] = []
    n_skipped = 0
    for record in df.to_dict(orient="records"):
        try:
            patterns.append(Pattern.from_record(record))
        except (TypeError, ValueError) as err:
            n_skipped += 1
            logger.warning("skipping pattern row: %s", err)
    if n_skipped:
        logger.warning("skipped %d of %d pattern rows", n_skipped, len(df))
    return patterns


def marginals_from_frame(df: pd.DataFrame) -> List[MarginalCode]:
    """Convert a marginal table (``code``, ``count``) into records."""
    _require_columns(df, MARGINAL_COLUMNS, "Marginal")
    df = df.dropna(subset=list(MARGINAL_COLUMNS))
    df = df.drop_duplicates(subset=["code"], keep="first")
    return [MarginalCode.from_record(r) for r in df.to_dict(orient="records")]


def load_patterns(path: str) -> List[Pattern]:
    df = read_table(path)
    logger.info("read %d pattern rows from %s", len(df), path)
    return patterns_from_frame(df)


def load_marginals(path: str) -> List[MarginalCode]:
    df = read_table(path)
    logger.info("read %d marginal rows from %s", len(df), path)
    return marginals_from_frame(df)


def marginals_from_patterns(patterns: List[Pattern]) -> List[MarginalCode]:
    """Derive per-code counts from the patterns when no marginal table exists.

    Each code's count is the total subjects over every pattern containing it.
    """
    rows = [(code, p.count) for p in patterns for code in p.codes]
    if not rows:
        return []
    totals = (
        pd.DataFrame(rows, columns=["code", "count"])
        .groupby("code", sort=False)["count"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    return [MarginalCode(str(code), int(count)) for code, count in totals.items()]
