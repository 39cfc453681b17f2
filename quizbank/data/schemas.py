"""Data schemas for quizbank."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class Difficulty(str, Enum):
    FOUNDATION = "foundation"
    ADVANCED = "advanced"
    EXPERT = "expert"


class QuizMode(str, Enum):
    LEARN = "learn"
    EXAM = "exam"


def _dedupe(items: Sequence[str]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for item in items:
        seen.setdefault(str(item), None)
    return tuple(seen)


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question from the bank.

    - `tags`: topic labels, order preserved, duplicates dropped
    - `answer_index`: zero-based index into `choices`
    - `deep_dive`: optional long-form follow-up shown with the explanation
    """

    id: str
    section: str
    tags: Tuple[str, ...]
    difficulty: Difficulty
    prompt: str
    choices: Tuple[str, ...]
    answer_index: int
    explanation: str
    deep_dive: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _dedupe(self.tags))
        object.__setattr__(self, "choices", tuple(self.choices))
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        if len(self.choices) < 2:
            raise ValueError(f"Question '{self.id}' needs at least two choices")
        if not 0 <= self.answer_index < len(self.choices):
            raise ValueError(
                f"Question '{self.id}' answer index {self.answer_index} is out of range"
            )

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> "Question":
        # Accept the camelCase spelling used by exported banks as well.
        answer = row.get("answer_index", row.get("answerIndex"))
        if answer is None or isinstance(answer, bool):
            raise ValueError(f"Row missing answer index: {row.get('id', 'unknown')}")
        return cls(
            id=str(row["id"]),
            section=str(row.get("section", "")),
            tags=tuple(row.get("tags") or ()),
            difficulty=Difficulty(row["difficulty"]),
            prompt=str(row["prompt"]),
            choices=tuple(str(c) for c in row["choices"]),
            answer_index=int(answer),
            explanation=str(row.get("explanation", "")),
            deep_dive=row.get("deep_dive", row.get("deepDive")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "section": self.section,
            "tags": list(self.tags),
            "difficulty": self.difficulty.value,
            "prompt": self.prompt,
            "choices": list(self.choices),
            "answer_index": self.answer_index,
            "explanation": self.explanation,
        }
        if self.deep_dive:
            out["deep_dive"] = self.deep_dive
        return out


@dataclass
class QuizConfig:
    count: int = 30
    difficulties: List[Difficulty] = field(
        default_factory=lambda: [Difficulty.FOUNDATION, Difficulty.ADVANCED]
    )
    tags: List[str] = field(default_factory=list)
    mode: QuizMode = QuizMode.LEARN
    seed: Optional[str] = None

    def merged(self, **overrides: Any) -> "QuizConfig":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "difficulties": [Difficulty(d).value for d in self.difficulties],
            "tags": list(self.tags),
            "mode": QuizMode(self.mode).value,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "QuizConfig":
        return cls(
            count=int(payload.get("count", 30)),
            difficulties=[Difficulty(d) for d in payload.get("difficulties", [])],
            tags=[str(t) for t in payload.get("tags", [])],
            mode=QuizMode(payload.get("mode", QuizMode.LEARN.value)),
            seed=payload.get("seed"),
        )


@dataclass(frozen=True)
class QuizSession:
    seed: str
    questions: Tuple[Question, ...]
    started_at: int  # epoch milliseconds

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]


@dataclass
class ScoreBucket:
    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


@dataclass
class ScoreSummary:
    total: int
    correct: int
    accuracy: float
    by_section: Dict[str, ScoreBucket]
    by_difficulty: Dict[Difficulty, ScoreBucket]
    by_tag: Dict[str, ScoreBucket]


@dataclass
class BankStats:
    sections: List[Tuple[str, int]]
    tags: List[Tuple[str, int]]
    difficulties: List[Tuple[Difficulty, int]]
