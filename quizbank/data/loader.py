"""Question bank loading utilities for quizbank."""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from .schemas import Question
from ..utils.io import read_json, read_jsonl
from ..utils.validation import SchemaValidationError, validate_question_rows

logger = logging.getLogger(__name__)

CHOICE_COLUMNS = ["choice_a", "choice_b", "choice_c", "choice_d", "choice_e", "choice_f"]
TAG_SEPARATOR = ";"
DEFAULT_BANK = "sample_bank.json"


def _answer_to_index(answer: Union[str, int], n_choices: int) -> int:
    """Convert answer to 0-based index."""
    if isinstance(answer, int):
        return answer
    answer = answer.strip().upper()
    if answer.isdigit():
        return int(answer)
    # Map A/B/C/D...
    if len(answer) == 1 and "A" <= answer <= "Z":
        idx = ord(answer) - ord("A")
        if 0 <= idx < n_choices:
            return idx
    raise ValueError(f"Unrecognized answer label: {answer}")


def _rows_from_csv(filepath: Path) -> List[Dict[str, Any]]:
    df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
    missing = [c for c in ("id", "section", "difficulty", "prompt", "answer_index") if c not in df.columns]
    if missing:
        raise ValueError(f"CSV bank {filepath} is missing columns: {', '.join(missing)}")

    rows = []
    for record in df.to_dict(orient="records"):
        choices = [record[c] for c in CHOICE_COLUMNS if record.get(c, "").strip()]
        try:
            answer_index = _answer_to_index(record["answer_index"], len(choices))
        except ValueError as e:
            raise ValueError(f"Invalid answer in row {record.get('id', 'unknown')}: {e}")
        row: Dict[str, Any] = {
            "id": record["id"],
            "section": record["section"],
            "tags": [t.strip() for t in record.get("tags", "").split(TAG_SEPARATOR) if t.strip()],
            "difficulty": record["difficulty"].strip().lower(),
            "prompt": record["prompt"],
            "choices": choices,
            "answer_index": answer_index,
            "explanation": record.get("explanation", ""),
        }
        if record.get("deep_dive", "").strip():
            row["deep_dive"] = record["deep_dive"]
        rows.append(row)
    return rows


def read_question_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read raw question rows from a .json, .jsonl or .csv bank.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file type or top-level shape is unsupported
    """
    filepath = Path(path).resolve()
    if not filepath.exists():
        raise FileNotFoundError(f"Question bank not found: {filepath}")
    if not filepath.is_file():
        raise ValueError(f"Path is not a file: {filepath}")

    suffix = filepath.suffix.lower()
    try:
        if suffix == ".jsonl":
            return list(read_jsonl(filepath))
        if suffix == ".csv":
            return _rows_from_csv(filepath)
        if suffix == ".json":
            payload = read_json(filepath)
            if isinstance(payload, dict):
                payload = payload.get("questions")
            if not isinstance(payload, list):
                raise ValueError(
                    f"Expected a list of questions or an object with 'questions' in {filepath}"
                )
            return payload
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {filepath}: {e}")
    raise ValueError(f"Expected .json, .jsonl or .csv file, got: {filepath.suffix}")


def load_question_bank(path: Union[str, Path]) -> List[Question]:
    """Load a question bank and return list of Question objects.

    Args:
        path: Path to a .json, .jsonl or .csv file

    Returns:
        List of Question objects in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is invalid or data is malformed
    """
    rows = read_question_rows(path)
    try:
        validate_question_rows(rows)
    except SchemaValidationError as e:
        raise ValueError(f"Invalid question bank {path}: {e}") from e

    questions = [Question.from_dict(row) for row in rows]
    logger.info("Loaded %d questions from %s", len(questions), path)
    return questions


def load_default_bank() -> List[Question]:
    """Load the sample bank shipped with the package."""
    source = resources.files("quizbank.data").joinpath(DEFAULT_BANK)
    with resources.as_file(source) as bank_path:
        return load_question_bank(bank_path)
