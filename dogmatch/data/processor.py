"""Load shelter catalogs and stored quiz answers into validated models."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from dogmatch.data.schemas import DogRecord, QuizAnswers

logger = logging.getLogger(__name__)

# Columns a stored quiz row carries that are not answers.
ANSWER_BOOKKEEPING_KEYS = frozenset(
    {
        "id",
        "session_id",
        "created_at",
        "total_score",
        "normalized_score",
        "completion_count",
        "completion_total",
        "completion_pct",
        "extra_answers",
    }
)


def load_dogs(catalog_path: Path) -> list[DogRecord]:
    """Load a dog catalog from a CSV or JSON records file.

    Blank cells become unknown values; comma separated play styles are
    split by the record validators. Rows are never dropped for bad data.

    Args:
        catalog_path: Path to a ``.csv`` or ``.json`` file.

    Returns:
        List of DogRecord objects in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file extension is not supported.
    """
    catalog_path = Path(catalog_path)
    if not catalog_path.exists():
        raise FileNotFoundError(f"Dog catalog not found: {catalog_path}")

    logger.info("Loading dog catalog from %s", catalog_path)

    suffix = catalog_path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(catalog_path, dtype={"id": str})
    elif suffix == ".json":
        df = pd.read_json(catalog_path, orient="records", dtype={"id": str})
    else:
        raise ValueError(f"Unsupported catalog format: {catalog_path.suffix}")

    records = [dog_from_row(row) for row in _frame_rows(df)]

    missing_ids = sum(1 for record in records if not record.id)
    if missing_ids:
        logger.warning("%d dogs in %s have no id", missing_ids, catalog_path)

    logger.info("Catalog: produced %d dog records", len(records))
    return records


def dog_from_row(row: Mapping[str, Any]) -> DogRecord:
    """Build a DogRecord from one catalog row, ignoring unknown columns."""
    return DogRecord.model_validate(dict(row))


def answers_from_row(row: Mapping[str, Any] | None) -> QuizAnswers:
    """Build QuizAnswers from a stored quiz row.

    Bookkeeping columns (ids, timestamps, stored scores) are removed first
    so they can never be mistaken for answers.

    Args:
        row: Stored row, or None when the adopter has no saved answers.

    Returns:
        QuizAnswers; empty when *row* is None.
    """
    if not row:
        return QuizAnswers()
    answers = {k: v for k, v in row.items() if k not in ANSWER_BOOKKEEPING_KEYS}
    return QuizAnswers.model_validate(answers)


def load_answers(answers_path: Path) -> QuizAnswers:
    """Load one adopter's answers from a JSON object file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not hold a JSON object.
    """
    answers_path = Path(answers_path)
    with open(answers_path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {answers_path}")
    return answers_from_row(data)


def _frame_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """DataFrame rows as dicts with NaN replaced by None."""
    cleaned = df.astype(object).where(pd.notna(df), None)
    return cleaned.to_dict(orient="records")
