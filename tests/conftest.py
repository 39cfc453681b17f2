from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizbank.data.schemas import Difficulty, Question  # noqa: E402
from quizbank.storage import LocalStore  # noqa: E402


def make_question(
    qid: str,
    difficulty: str = "foundation",
    section: str = "Basics",
    tags=("accounts",),
    answer_index: int = 0,
) -> Question:
    return Question(
        id=qid,
        section=section,
        tags=tuple(tags),
        difficulty=Difficulty(difficulty),
        prompt=f"Prompt {qid}",
        choices=("A", "B", "C"),
        answer_index=answer_index,
        explanation=f"Because {qid}",
    )


@pytest.fixture
def two_questions() -> List[Question]:
    """The two-question bank: one foundation, one advanced."""
    return [
        Question(
            id="Q1",
            section="Basics",
            tags=("accounts",),
            difficulty=Difficulty.FOUNDATION,
            prompt="Test 1",
            choices=("A", "B"),
            answer_index=0,
            explanation="A",
        ),
        Question(
            id="Q2",
            section="Basics",
            tags=("transactions",),
            difficulty=Difficulty.ADVANCED,
            prompt="Test 2",
            choices=("A", "B"),
            answer_index=1,
            explanation="B",
        ),
    ]


@pytest.fixture
def mixed_bank() -> List[Question]:
    """Twenty questions spread over sections, tags and difficulties."""
    levels = ["foundation", "advanced", "expert", "foundation"]
    sections = ["Accounts", "Runtime", "Tokens"]
    tag_sets = [("accounts",), ("runtime", "cpi"), ("tokens", "accounts"), ("fees",)]
    return [
        make_question(
            f"q{i:02d}",
            difficulty=levels[i % 4],
            section=sections[i % 3],
            tags=tag_sets[i % 4],
            answer_index=i % 3,
        )
        for i in range(20)
    ]


@pytest.fixture
def bank_rows() -> List[dict]:
    return [
        {
            "id": "b1",
            "section": "Accounts",
            "tags": ["accounts", "rent"],
            "difficulty": "foundation",
            "prompt": "What makes an account rent exempt?",
            "choices": ["Any balance", "Two years of rent"],
            "answer_index": 1,
            "explanation": "Two years of rent.",
        },
        {
            "id": "b2",
            "section": "Runtime",
            "tags": ["runtime"],
            "difficulty": "expert",
            "prompt": "Maximum CPI depth?",
            "choices": ["2", "4", "8"],
            "answerIndex": 1,
            "explanation": "Four.",
            "deepDive": "Nested invocations beyond four fail.",
        },
    ]


@pytest.fixture
def bank_json_file(tmp_path, bank_rows) -> Path:
    path = tmp_path / "bank.json"
    path.write_text(json.dumps({"questions": bank_rows}), encoding="utf-8")
    return path


@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "store")
