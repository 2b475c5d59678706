"""
Student Difficulty State Data Model

Defines the per-student, per-chapter difficulty state and the append-only
state transition record written once per answer.
"""

import uuid
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any
from datetime import datetime


MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5

DIFFICULTY_LABELS = {
    1: "Very Easy",
    2: "Easy",
    3: "Medium",
    4: "Hard",
    5: "Very Hard",
}


def get_difficulty_label(level: int) -> str:
    """Human-readable label for a difficulty level."""
    return DIFFICULTY_LABELS.get(level, "Unknown")


@dataclass
class StudentDifficultyState:
    """Difficulty and mastery state for one student in one chapter."""
    user_id: str
    chapter_id: str
    difficulty_level: int = MIN_DIFFICULTY
    mastery_level: float = 0.0  # 0-100
    correct_streak: int = 0
    wrong_streak: int = 0
    total_attempts: int = 0
    correct_answers: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not MIN_DIFFICULTY <= self.difficulty_level <= MAX_DIFFICULTY:
            raise ValueError(
                f"difficulty_level must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, "
                f"got {self.difficulty_level}"
            )
        if not 0 <= self.mastery_level <= 100:
            raise ValueError(f"mastery_level must be between 0 and 100, got {self.mastery_level}")
        if self.correct_streak < 0 or self.wrong_streak < 0:
            raise ValueError("Streaks cannot be negative")
        if self.correct_answers > self.total_attempts:
            raise ValueError("correct_answers cannot exceed total_attempts")

    @property
    def difficulty_label(self) -> str:
        return get_difficulty_label(self.difficulty_level)

    @property
    def accuracy(self) -> float:
        """Share of correct answers in percent (0 before the first attempt)."""
        if self.total_attempts == 0:
            return 0.0
        return self.correct_answers / self.total_attempts * 100

    def snapshot(self) -> Dict[str, Any]:
        """Plain dict of the metrics that matter for research logging."""
        return {
            "difficulty_level": self.difficulty_level,
            "mastery_level": round(self.mastery_level, 2),
            "correct_streak": self.correct_streak,
            "wrong_streak": self.wrong_streak,
            "total_attempts": self.total_attempts,
            "correct_answers": self.correct_answers,
        }


@dataclass(frozen=True)
class StateTransition:
    """Audit record of one answer: previous state, action, new state and reward."""
    user_id: str
    chapter_id: str
    question_id: Optional[str]
    prev_state: Dict[str, Any]
    action: str
    action_reason: str
    new_state: Dict[str, Any]
    reward: int
    was_correct: bool
    time_spent: Optional[float]
    session_id: str
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data
