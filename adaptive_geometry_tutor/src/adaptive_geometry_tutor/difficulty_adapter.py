"""
Difficulty Adaptation

Applies a policy action to the bounded difficulty level (1-5).
Advancing a chapter resets the level to the mid-difficulty default.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from adaptive_geometry_tutor.policy_engine import Action
from adaptive_geometry_tutor.student_state import StudentDifficultyState, MIN_DIFFICULTY, MAX_DIFFICULTY

logger = logging.getLogger(__name__)


@dataclass
class DifficultyAdjustment:
    """Result of difficulty adjustment check."""
    should_adjust: bool
    direction: Optional[str]  # "increase", "decrease", "reset", or None
    reason: str
    new_difficulty: int


class DifficultyAdapter:
    """
    State machine over difficulty levels 1-5.

    - decrease_difficulty: one level down, floored at 1
    - increase_difficulty: one level up, capped at 5
    - advance_chapter: reset to 3 for the next chapter
    - everything else: no change
    """

    CHAPTER_START_DIFFICULTY = 3

    def check_adjustment(self, current_difficulty: int, action: Action) -> DifficultyAdjustment:
        """
        Work out the level an action leads to.

        Args:
            current_difficulty: Current difficulty level
            action: Action chosen by the policy engine

        Returns:
            DifficultyAdjustment; should_adjust is False when the level would not change
        """
        if action == Action.DECREASE_DIFFICULTY:
            new_difficulty = self._lower_difficulty(current_difficulty)
            direction = "decrease"
        elif action == Action.INCREASE_DIFFICULTY:
            new_difficulty = self._raise_difficulty(current_difficulty)
            direction = "increase"
        elif action == Action.ADVANCE_CHAPTER:
            new_difficulty = self.CHAPTER_START_DIFFICULTY
            direction = "reset"
        else:
            return DifficultyAdjustment(
                should_adjust=False,
                direction=None,
                reason=f"Action '{Action(action).value}' keeps difficulty at {current_difficulty}",
                new_difficulty=current_difficulty,
            )

        if new_difficulty == current_difficulty:
            return DifficultyAdjustment(
                should_adjust=False,
                direction=None,
                reason=f"Difficulty already at {current_difficulty}",
                new_difficulty=current_difficulty,
            )

        return DifficultyAdjustment(
            should_adjust=True,
            direction=direction,
            reason=f"{direction.capitalize()}: {current_difficulty} → {new_difficulty}",
            new_difficulty=new_difficulty,
        )

    def _raise_difficulty(self, current: int) -> int:
        return min(MAX_DIFFICULTY, current + 1)

    def _lower_difficulty(self, current: int) -> int:
        return max(MIN_DIFFICULTY, current - 1)

    def apply_adjustment(self, state: StudentDifficultyState, adjustment: DifficultyAdjustment) -> bool:
        """
        Apply difficulty adjustment to the student state.

        Returns:
            True if the level changed (and needs persisting), False otherwise
        """
        if not adjustment.should_adjust:
            return False

        old_difficulty = state.difficulty_level
        state.difficulty_level = adjustment.new_difficulty

        logger.info(
            f"📊 [DifficultyAdapter] {state.user_id}/{state.chapter_id}: "
            f"{old_difficulty} → {adjustment.new_difficulty} ({adjustment.direction})"
        )
        return True
