"""Schema validation utilities for question banks and stored records."""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

DIFFICULTY_VALUES = ["foundation", "advanced", "expert"]
MODE_VALUES = ["learn", "exam"]
RECORD_VERSION = 1


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class SchemaValidationError(ValidationError):
    """Raised when data doesn't match expected schema."""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        shown = "; ".join(self.errors[:5])
        more = f" (+{len(self.errors) - 5} more)" if len(self.errors) > 5 else ""
        return f"{base}: {shown}{more}"


@dataclass
class FieldSpec:
    """Specification for a data field."""
    name: str
    type: Any
    required: bool = True
    nullable: bool = False
    min_length: Optional[int] = None
    choices: Optional[List[Any]] = None
    validator: Optional[Callable[[Any], bool]] = None


@dataclass
class RecordSchema:
    """Schema definition for a collection of records."""
    name: str
    fields: List[FieldSpec]
    allow_extra_fields: bool = True
    min_records: Optional[int] = None


def _all_strings(values: Any) -> bool:
    return all(isinstance(v, str) for v in values)


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _valid_answer_map(answers: Dict[str, Any]) -> bool:
    return all(v is None or _is_non_negative_int(v) for v in answers.values())


def _valid_score_records(records: List[Any]) -> bool:
    for rec in records:
        if not isinstance(rec, dict):
            return False
        for key in ("accuracy", "total", "correct", "at"):
            value = rec.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            if not math.isfinite(value):
                return False
    return True


QUESTION_SCHEMA = RecordSchema(
    name="question_bank",
    fields=[
        FieldSpec(name="id", type=(str, int), required=True),
        FieldSpec(name="section", type=str, required=True, min_length=1),
        FieldSpec(name="tags", type=list, required=False, validator=_all_strings),
        FieldSpec(name="difficulty", type=str, required=True, choices=DIFFICULTY_VALUES),
        FieldSpec(name="prompt", type=str, required=True, min_length=1),
        FieldSpec(name="choices", type=list, required=True, min_length=2, validator=_all_strings),
        FieldSpec(name="explanation", type=str, required=False, nullable=True),
        FieldSpec(name="deep_dive", type=str, required=False, nullable=True),
    ],
    allow_extra_fields=True,
    min_records=1,
)

SESSION_RECORD_SCHEMA = RecordSchema(
    name="stored_session",
    fields=[
        FieldSpec(name="version", type=int, required=True, choices=[RECORD_VERSION]),
        FieldSpec(name="config", type=dict, required=True),
        FieldSpec(name="answers", type=dict, required=True, validator=_valid_answer_map),
        FieldSpec(name="current_index", type=int, required=True, validator=_is_non_negative_int),
        FieldSpec(name="seed", type=str, required=True),
        FieldSpec(name="question_ids", type=list, required=True, validator=_all_strings),
        FieldSpec(name="started_at", type=int, required=True),
        FieldSpec(name="mode", type=str, required=True, choices=MODE_VALUES),
        FieldSpec(name="flagged", type=list, required=True, validator=_all_strings),
    ],
    allow_extra_fields=False,
)

STATS_RECORD_SCHEMA = RecordSchema(
    name="stored_stats",
    fields=[
        FieldSpec(name="version", type=int, required=True, choices=[RECORD_VERSION]),
        FieldSpec(name="total_runs", type=int, required=True, validator=_is_non_negative_int),
        FieldSpec(name="total_answered", type=int, required=True, validator=_is_non_negative_int),
        FieldSpec(name="total_correct", type=int, required=True, validator=_is_non_negative_int),
        FieldSpec(name="last_scores", type=list, required=True, validator=_valid_score_records),
    ],
    allow_extra_fields=False,
)


class SchemaValidator:
    """Validator for record schemas."""

    def __init__(self, schema: RecordSchema):
        """Initialize validator with schema.

        Args:
            schema: Record schema to validate against
        """
        self.schema = schema

    def validate_record(self, record: Dict[str, Any]) -> List[str]:
        """Validate a single record against schema.

        Args:
            record: Record to validate

        Returns:
            List of validation errors (empty if valid)
        """
        if not isinstance(record, dict):
            return [f"Expected an object, got {type(record).__name__}"]

        errors = []

        # Check required fields
        for field_spec in self.schema.fields:
            if field_spec.required and field_spec.name not in record:
                errors.append(f"Missing required field: {field_spec.name}")
                continue

            if field_spec.name in record:
                value = record[field_spec.name]

                # Check nullable
                if value is None:
                    if not field_spec.nullable:
                        errors.append(f"Field {field_spec.name} cannot be null")
                    continue

                # Check type; bools are not accepted where an int is expected
                expected_types = field_spec.type if isinstance(field_spec.type, tuple) else (field_spec.type,)
                if isinstance(value, bool) and bool not in expected_types:
                    errors.append(f"Field {field_spec.name} has wrong type: got bool")
                    continue
                if not any(isinstance(value, t) for t in expected_types):
                    errors.append(
                        f"Field {field_spec.name} has wrong type: expected {field_spec.type}, "
                        f"got {type(value).__name__}"
                    )
                    continue

                # Minimum length for strings and lists
                if isinstance(value, (str, list)):
                    unit = "chars" if isinstance(value, str) else "items"
                    if field_spec.min_length and len(value) < field_spec.min_length:
                        errors.append(
                            f"Field {field_spec.name} too short: minimum {field_spec.min_length} {unit}"
                        )

                # Check choices
                if field_spec.choices and value not in field_spec.choices:
                    errors.append(
                        f"Field {field_spec.name} has invalid value: must be one of {field_spec.choices}"
                    )

                # Custom validator
                if field_spec.validator:
                    try:
                        if not field_spec.validator(value):
                            errors.append(f"Field {field_spec.name} failed custom validation")
                    except Exception as e:
                        errors.append(f"Field {field_spec.name} validation error: {e}")

        # Check for extra fields
        if not self.schema.allow_extra_fields:
            expected_fields = {f.name for f in self.schema.fields}
            extra_fields = set(record.keys()) - expected_fields
            if extra_fields:
                errors.append(f"Unexpected fields: {', '.join(sorted(extra_fields))}")

        return errors


def validate_answer_index(record: Dict[str, Any]) -> List[str]:
    """Check the answer index of a raw question row against its choices."""
    answer = record.get("answer_index", record.get("answerIndex"))
    choices = record.get("choices")
    if answer is None:
        return ["Missing required field: answer_index"]
    if isinstance(answer, bool) or not isinstance(answer, int):
        return [f"answer_index must be an integer, got {type(answer).__name__}"]
    if isinstance(choices, list) and not 0 <= answer < len(choices):
        return [f"answer_index {answer} is out of range for {len(choices)} choices"]
    return []


def validate_question_rows(rows: List[Dict[str, Any]]) -> None:
    """Validate raw question-bank rows, including answer indices and unique ids.

    Raises:
        SchemaValidationError: If validation fails
    """
    validator = SchemaValidator(QUESTION_SCHEMA)
    errors: List[str] = []
    if QUESTION_SCHEMA.min_records and len(rows) < QUESTION_SCHEMA.min_records:
        errors.append(f"Too few records: minimum {QUESTION_SCHEMA.min_records}")
    seen: Dict[str, int] = {}
    for i, row in enumerate(rows):
        row_errors = validator.validate_record(row)
        if isinstance(row, dict):
            row_errors.extend(validate_answer_index(row))
            rid = str(row.get("id", ""))
            if rid in seen:
                row_errors.append(f"Duplicate id '{rid}' (first seen in record {seen[rid]})")
            else:
                seen[rid] = i
        errors.extend(f"Record {i}: {e}" for e in row_errors)
    if errors:
        raise SchemaValidationError(
            f"Question bank validation failed with {len(errors)} errors", errors=errors
        )


def validate_question_bank(filepath: Union[str, Path]) -> int:
    """Validate a question bank file.

    Args:
        filepath: Path to a .json, .jsonl or .csv bank

    Returns:
        Number of validated questions

    Raises:
        SchemaValidationError: If validation fails
        FileNotFoundError: If file doesn't exist
    """
    from ..data.loader import read_question_rows

    rows = read_question_rows(filepath)
    validate_question_rows(rows)
    logger.info("Question bank validation passed: %s (%d questions)", filepath, len(rows))
    return len(rows)
