from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..utils.validation import SchemaValidationError, validate_question_bank


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="python -m quizbank.cli.validate_bank",
        description=(
            "Validate a question bank (.json, .jsonl or .csv) before use.\n"
            "On failure, prints each offending record and field."
        ),
    )
    ap.add_argument("bank", help="Path to the question bank file")
    args = ap.parse_args(argv)

    bank_path = Path(args.bank)
    try:
        n = validate_question_bank(bank_path)
        print(f"[validate_bank] OK: {bank_path} ({n} questions)")
        return 0
    except FileNotFoundError:
        print(f"[validate_bank] Error: bank not found: {bank_path}")
        return 1
    except SchemaValidationError as e:
        # Dedicated exit code for schema failures to distinguish from other errors
        print("[validate_bank] Schema validation failed.")
        for err in e.errors:
            print(f"[validate_bank]   {err}")
        return 4
    except ValueError as e:
        print(f"[validate_bank] Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
