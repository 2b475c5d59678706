"""
Rule-Based Policy Engine

Maps a student's state to exactly one pedagogical action plus a readable
reason. Rules are checked in a fixed priority order and the first match wins.
This is a fixed rule table, not a learned policy.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Tuple

from adaptive_geometry_tutor.student_state import StudentDifficultyState, MAX_DIFFICULTY


class Action(str, Enum):
    """Pedagogical actions."""
    # Emitted by the policy engine
    DECREASE_DIFFICULTY = "decrease_difficulty"
    MAINTAIN_DIFFICULTY = "maintain_difficulty"
    INCREASE_DIFFICULTY = "increase_difficulty"
    ADVANCE_CHAPTER = "advance_chapter"
    REPEAT_CURRENT = "repeat_current"

    # Teaching-strategy actions a client may attach to a hint request
    GIVE_HINT_THEN_RETRY = "give_hint_then_retry"
    REPEAT_DIFFERENT_REPRESENTATION = "repeat_same_concept_different_representation"
    SWITCH_TO_VISUAL = "switch_to_visual_example"
    SWITCH_TO_REAL_WORLD = "switch_to_real_world_context"


@dataclass(frozen=True)
class PolicyDecision:
    """Result of one policy evaluation."""
    action: Action
    reason: str
    rule: str


@dataclass(frozen=True)
class PolicyRule:
    name: str
    matches: Callable[[StudentDifficultyState], bool]
    action: Action
    explain: Callable[[StudentDifficultyState], str]


# Order matters: Rule 5 uses exact equality on wrong_streak, so a wrong streak
# of 3+ at level 1 falls through to the default rule.
RULES: Tuple[PolicyRule, ...] = (
    PolicyRule(
        name="frustration",
        matches=lambda s: s.wrong_streak >= 3 and s.difficulty_level > 1,
        action=Action.DECREASE_DIFFICULTY,
        explain=lambda s: (
            f"Frustration: {s.wrong_streak} wrong answers in a row at level "
            f"{s.difficulty_level}. Easing off."
        ),
    ),
    PolicyRule(
        name="mastery_achieved",
        matches=lambda s: (
            s.mastery_level >= 85 and s.correct_streak >= 3 and s.difficulty_level == MAX_DIFFICULTY
        ),
        action=Action.ADVANCE_CHAPTER,
        explain=lambda s: (
            f"Mastery achieved: {s.mastery_level:.1f}% at the hardest level "
            f"with {s.correct_streak} correct in a row."
        ),
    ),
    PolicyRule(
        name="strong_performance",
        matches=lambda s: (
            s.correct_streak >= 5 and s.mastery_level >= 75 and s.difficulty_level < MAX_DIFFICULTY
        ),
        action=Action.INCREASE_DIFFICULTY,
        explain=lambda s: (
            f"Strong performance: {s.correct_streak} correct in a row, "
            f"{s.mastery_level:.1f}% mastery."
        ),
    ),
    PolicyRule(
        name="boredom",
        matches=lambda s: s.correct_streak >= 8 and s.difficulty_level <= 2 and s.mastery_level >= 80,
        action=Action.INCREASE_DIFFICULTY,
        explain=lambda s: (
            f"Too easy (boredom risk): {s.correct_streak} correct in a row at level "
            f"{s.difficulty_level}."
        ),
    ),
    PolicyRule(
        name="building_foundation",
        matches=lambda s: s.wrong_streak == 2 and s.mastery_level < 50,
        action=Action.REPEAT_CURRENT,
        explain=lambda s: (
            f"Building foundation: 2 wrong answers in a row with "
            f"{s.mastery_level:.1f}% mastery. Practising this level again."
        ),
    ),
    PolicyRule(
        name="steady_progress",
        matches=lambda s: s.mastery_level < 60 and s.correct_streak < 3 and s.wrong_streak < 2,
        action=Action.MAINTAIN_DIFFICULTY,
        explain=lambda s: f"Steady progress: {s.mastery_level:.1f}% mastery.",
    ),
)

DEFAULT_RULE = PolicyRule(
    name="balanced_performance",
    matches=lambda s: True,
    action=Action.MAINTAIN_DIFFICULTY,
    explain=lambda s: f"Balanced performance: {s.mastery_level:.1f}% mastery.",
)


class PolicyEngine:
    """Pure function from state to (action, reason)."""

    def __init__(self, rules: Tuple[PolicyRule, ...] = RULES):
        self.rules = rules

    def decide(self, state: StudentDifficultyState) -> PolicyDecision:
        for rule in self.rules:
            if rule.matches(state):
                return PolicyDecision(action=rule.action, reason=rule.explain(state), rule=rule.name)
        return PolicyDecision(
            action=DEFAULT_RULE.action,
            reason=DEFAULT_RULE.explain(state),
            rule=DEFAULT_RULE.name,
        )
