# services/quiz_service/questions.py
"""
Question files: one `YYYYMMDD.json` per quiz date in the questions directory.

A file is either `{"questions": [...], "theme": ..., "announcement": ...}` or,
for the oldest files, a bare list of questions.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Question:
    question: str
    answer: str
    aliases: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            question=str(data.get("question", "")),
            answer=str(data.get("answer", "")),
            aliases=[str(a) for a in data.get("aliases") or []],
        )


@dataclass(frozen=True)
class QuizData:
    questions: List[Question]
    theme: Optional[str] = None
    announcement: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "QuizData":
        if isinstance(data, list):
            data = {"questions": data}
        return cls(
            questions=[Question.from_dict(q) for q in data.get("questions") or []],
            theme=data.get("theme"),
            announcement=data.get("announcement"),
        )


def normalize_date_param(value: Optional[str]) -> str:
    """`2024-03-07` / `20240307` -> `20240307`."""
    return (value or "").strip().replace("-", "")


def is_date_key(value: str) -> bool:
    return len(value) == 8 and value.isdigit()


def question_path(questions_dir: str | Path, key: str) -> Path:
    if not is_date_key(key):
        raise ValueError(f"invalid quiz date: {key!r}")
    return Path(questions_dir) / f"{key}.json"


def load_question_file(questions_dir: str | Path, key: str) -> Optional[Any]:
    """Raw JSON of a quiz file, or None when there is no quiz that day."""
    path = question_path(questions_dir, key)
    if not path.exists():
        return None
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def available_dates(questions_dir: str | Path) -> List[str]:
    directory = Path(questions_dir)
    if not directory.is_dir():
        logger.warning("Questions directory %s does not exist", directory)
        return []
    return sorted(p.stem for p in directory.glob("*.json") if is_date_key(p.stem))
