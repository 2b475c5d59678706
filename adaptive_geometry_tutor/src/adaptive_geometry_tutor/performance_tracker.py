"""
Performance Tracker

Folds one answer outcome into a student's difficulty state.
Mastery is recomputed from scratch on every answer from accuracy plus
streak momentum, so it cannot drift away from the underlying counters.
"""

from dataclasses import replace
from datetime import datetime

from adaptive_geometry_tutor.student_state import StudentDifficultyState


class PerformanceTracker:
    """
    Updates attempt counters, streaks and mastery after an answer.

    Mastery = clamp(accuracy + streak_bonus - streak_penalty, 0, 100) where
    streak bonus and penalty are 3 points per streak step, capped at 15.
    """

    STREAK_STEP = 3
    STREAK_CAP = 15

    def record_answer(self, state: StudentDifficultyState, is_correct: bool) -> StudentDifficultyState:
        """
        Return a new state with the answer folded in.

        Args:
            state: Current state (not modified)
            is_correct: Whether the latest answer was correct

        Returns:
            Updated StudentDifficultyState
        """
        total_attempts = state.total_attempts + 1
        correct_answers = state.correct_answers + (1 if is_correct else 0)
        correct_streak = state.correct_streak + 1 if is_correct else 0
        wrong_streak = 0 if is_correct else state.wrong_streak + 1

        mastery = self.calculate_mastery(total_attempts, correct_answers, correct_streak, wrong_streak)

        return replace(
            state,
            total_attempts=total_attempts,
            correct_answers=correct_answers,
            correct_streak=correct_streak,
            wrong_streak=wrong_streak,
            mastery_level=mastery,
            last_updated=datetime.now(),
        )

    def calculate_mastery(
        self,
        total_attempts: int,
        correct_answers: int,
        correct_streak: int,
        wrong_streak: int,
    ) -> float:
        if total_attempts <= 0:
            return 0.0
        accuracy = correct_answers / total_attempts * 100
        streak_bonus = min(correct_streak * self.STREAK_STEP, self.STREAK_CAP)
        streak_penalty = min(wrong_streak * self.STREAK_STEP, self.STREAK_CAP)
        return max(0.0, min(100.0, accuracy + streak_bonus - streak_penalty))
