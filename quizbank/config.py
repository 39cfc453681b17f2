from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .data.schemas import Difficulty, QuizConfig, QuizMode


@dataclass
class LoggingConfig:
    level: str = os.getenv("QUIZBANK_LOG_LEVEL", "INFO")
    log_dir: str = "logs"
    filename: str = "quizbank.log"


@dataclass
class QuizDefaults:
    count: int = 30
    difficulties: List[str] = field(
        default_factory=lambda: [Difficulty.FOUNDATION.value, Difficulty.ADVANCED.value]
    )
    mode: str = QuizMode.LEARN.value

    def to_quiz_config(self, seed: Optional[str] = None) -> QuizConfig:
        return QuizConfig(
            count=self.count,
            difficulties=[Difficulty(d) for d in self.difficulties],
            tags=[],
            mode=QuizMode(self.mode),
            seed=seed,
        )


@dataclass
class StorageConfig:
    root: str = os.getenv("QUIZBANK_STORAGE_DIR", ".quizbank")
    bank: Optional[str] = os.getenv("QUIZBANK_BANK") or None


@dataclass
class AppConfig:
    logging: LoggingConfig = None  # type: ignore[assignment]
    quiz: QuizDefaults = None  # type: ignore[assignment]
    storage: StorageConfig = None  # type: ignore[assignment]

    @staticmethod
    def from_file(path: str | Path) -> "AppConfig":
        """Read a JSON or YAML config; missing sections fall back to defaults."""
        p = Path(path)
        with open(p, "r", encoding="utf-8") as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                payload = yaml.safe_load(f) or {}
            else:
                payload = json.load(f)
        return AppConfig(
            logging=LoggingConfig(**payload.get("logging", {})),
            quiz=QuizDefaults(**payload.get("quiz", {})),
            storage=StorageConfig(**payload.get("storage", {})),
        )

    def to_json(self, path: str | Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump({
                "logging": asdict(self.logging),
                "quiz": asdict(self.quiz),
                "storage": asdict(self.storage),
            }, f, indent=2, ensure_ascii=False)


# Provide safe defaults via a factory function for top-level config
def default_app_config() -> AppConfig:
    return AppConfig(
        logging=LoggingConfig(),
        quiz=QuizDefaults(),
        storage=StorageConfig(),
    )
