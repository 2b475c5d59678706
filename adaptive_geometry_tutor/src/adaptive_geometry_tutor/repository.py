"""
Adaptive Learning Repository

Persistence seam for difficulty state, state transitions and the question
bank. The engine only depends on the AdaptiveLearningRepository protocol;
InMemoryAdaptiveLearningRepository backs tests and local runs.
"""

import logging
from collections import Counter
from dataclasses import replace
from typing import Any, Dict, List, Optional, Protocol, Tuple

from adaptive_geometry_tutor.schemas import GeneratedQuestion
from adaptive_geometry_tutor.student_state import StateTransition, StudentDifficultyState

logger = logging.getLogger(__name__)


class AdaptiveLearningRepository(Protocol):
    async def get_student_difficulty(self, user_id: str, chapter_id: str) -> Optional[StudentDifficultyState]:
        ...

    async def create_student_difficulty(self, user_id: str, chapter_id: str) -> StudentDifficultyState:
        ...

    async def update_student_difficulty(self, state: StudentDifficultyState) -> StudentDifficultyState:
        ...

    async def log_state_transition(self, transition: StateTransition) -> None:
        ...

    async def get_questions_by_difficulty(
        self, chapter_id: str, difficulty_level: int, exclude_ids: Optional[List[str]] = None
    ) -> List[GeneratedQuestion]:
        ...

    async def get_performance_history(
        self, user_id: str, chapter_id: Optional[str] = None, limit: int = 50
    ) -> List[Dict[str, Any]]:
        ...

    async def get_research_statistics(self, chapter_id: Optional[str] = None) -> Dict[str, Any]:
        ...

    async def get_practiced_topics(self, user_id: str) -> List[str]:
        ...


class InMemoryAdaptiveLearningRepository:
    """Process-local repository. States are copied in and out so callers never share instances."""

    def __init__(self):
        self.states: Dict[Tuple[str, str], StudentDifficultyState] = {}
        self.transitions: List[StateTransition] = []
        self.questions: Dict[Tuple[str, int], List[GeneratedQuestion]] = {}
        self.chapter_names: Dict[str, str] = {}

    async def get_student_difficulty(self, user_id: str, chapter_id: str) -> Optional[StudentDifficultyState]:
        state = self.states.get((user_id, chapter_id))
        return replace(state) if state else None

    async def create_student_difficulty(self, user_id: str, chapter_id: str) -> StudentDifficultyState:
        state = StudentDifficultyState(user_id=user_id, chapter_id=chapter_id)
        self.states[(user_id, chapter_id)] = state
        logger.info(f"[Repository] Created difficulty state for {user_id}/{chapter_id}")
        return replace(state)

    async def update_student_difficulty(self, state: StudentDifficultyState) -> StudentDifficultyState:
        # Last write wins
        self.states[(state.user_id, state.chapter_id)] = replace(state)
        return replace(state)

    async def log_state_transition(self, transition: StateTransition) -> None:
        self.transitions.append(transition)

    def add_chapter(self, chapter_id: str, name: str):
        self.chapter_names[chapter_id] = name

    def add_question(self, chapter_id: str, difficulty_level: int, question: GeneratedQuestion):
        self.questions.setdefault((chapter_id, difficulty_level), []).append(question)

    async def get_questions_by_difficulty(
        self, chapter_id: str, difficulty_level: int, exclude_ids: Optional[List[str]] = None
    ) -> List[GeneratedQuestion]:
        excluded = set(exclude_ids or [])
        return [
            question for question in self.questions.get((chapter_id, difficulty_level), [])
            if question.id not in excluded
        ]

    async def get_performance_history(
        self, user_id: str, chapter_id: Optional[str] = None, limit: int = 50
    ) -> List[Dict[str, Any]]:
        """Most recent transitions first."""
        history = [
            t for t in self.transitions
            if t.user_id == user_id and (chapter_id is None or t.chapter_id == chapter_id)
        ]
        history.sort(key=lambda t: t.timestamp, reverse=True)
        return [t.to_dict() for t in history[:limit]]

    async def get_research_statistics(self, chapter_id: Optional[str] = None) -> Dict[str, Any]:
        transitions = [t for t in self.transitions if chapter_id is None or t.chapter_id == chapter_id]
        total = len(transitions)
        if total == 0:
            return {
                "total_transitions": 0,
                "unique_students": 0,
                "accuracy": 0.0,
                "average_reward": 0.0,
                "action_distribution": {},
            }

        correct = sum(1 for t in transitions if t.was_correct)
        actions = Counter(t.action for t in transitions)
        return {
            "total_transitions": total,
            "unique_students": len({t.user_id for t in transitions}),
            "accuracy": round(correct / total * 100, 2),
            "average_reward": round(sum(t.reward for t in transitions) / total, 2),
            "action_distribution": dict(actions),
        }

    async def get_practiced_topics(self, user_id: str) -> List[str]:
        """Names of the chapters the student has a difficulty state in."""
        chapter_ids = {chapter_id for (uid, chapter_id) in self.states if uid == user_id}
        return sorted(self.chapter_names[c] for c in chapter_ids if c in self.chapter_names)
