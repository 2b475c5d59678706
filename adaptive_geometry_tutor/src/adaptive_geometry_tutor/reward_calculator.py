"""
Reward Calculator

Scalar signal for research logging of state transitions.
The value never feeds back into action selection.
"""

from adaptive_geometry_tutor.policy_engine import Action
from adaptive_geometry_tutor.student_state import StudentDifficultyState


class RewardCalculator:
    """Additive reward from the transition; several terms may stack."""

    REWARDS = {
        "MASTERY_IMPROVED": 5,
        "ON_STREAK": 2,
        "HIGH_MASTERY": 3,
        "ADVANCE_CHAPTER": 10,
        "MASTERY_DECREASED": -2,
        "FRUSTRATION": -5,
        "BOREDOM": -3,
    }

    def calculate(
        self,
        prev_state: StudentDifficultyState,
        new_state: StudentDifficultyState,
        action: Action,
    ) -> int:
        """
        Args:
            prev_state: State before the answer
            new_state: State after the answer, at the level the answer was given
            action: Action chosen for this transition
        """
        reward = 0

        if new_state.mastery_level > prev_state.mastery_level:
            reward += self.REWARDS["MASTERY_IMPROVED"]
        elif new_state.mastery_level < prev_state.mastery_level:
            reward += self.REWARDS["MASTERY_DECREASED"]

        if new_state.correct_streak > 0:
            reward += self.REWARDS["ON_STREAK"]

        if new_state.mastery_level >= 75:
            reward += self.REWARDS["HIGH_MASTERY"]

        if action == Action.ADVANCE_CHAPTER:
            reward += self.REWARDS["ADVANCE_CHAPTER"]

        if new_state.wrong_streak >= 5:
            reward += self.REWARDS["FRUSTRATION"]

        if new_state.correct_streak >= 10 and new_state.difficulty_level <= 2:
            reward += self.REWARDS["BOREDOM"]

        return reward


def get_reward_label(reward: int) -> str:
    """Label for logging."""
    if reward > 8:
        return "Excellent"
    if reward > 5:
        return "Good"
    if reward > 0:
        return "Positive"
    if reward == 0:
        return "Neutral"
    if reward > -5:
        return "Minor Penalty"
    return "Major Penalty"
