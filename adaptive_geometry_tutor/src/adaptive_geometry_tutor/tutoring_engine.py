"""
Adaptive Tutoring Engine

Entry point for answer submissions, hint requests and next-question requests.

Answer flow:
    PerformanceTracker -> PolicyEngine -> DifficultyAdapter -> RewardCalculator -> transition log

Hint and question requests go through the HintGate, which never raises.
Concurrent submissions for the same student/chapter are not serialized;
the repository keeps whichever write lands last.
"""

import re
import uuid
from dataclasses import replace
from typing import Any, Dict, List, Optional

from adaptive_geometry_tutor.config import TutorConfig
from adaptive_geometry_tutor.difficulty_adapter import DifficultyAdapter
from adaptive_geometry_tutor.hint_gate import HintGate
from adaptive_geometry_tutor.logger import get_logger
from adaptive_geometry_tutor.performance_tracker import PerformanceTracker
from adaptive_geometry_tutor.policy_engine import Action, PolicyEngine
from adaptive_geometry_tutor.repository import AdaptiveLearningRepository
from adaptive_geometry_tutor.reward_calculator import RewardCalculator, get_reward_label
from adaptive_geometry_tutor.schemas import (
    AnswerResult,
    AnswerSubmission,
    HintRequest,
    HintResponse,
    QuestionGenerationRequest,
    QuestionResult,
)
from adaptive_geometry_tutor.student_state import StateTransition, StudentDifficultyState
from adaptive_geometry_tutor.template_questions import TemplateQuestionGenerator

logger = get_logger(__name__)

FEEDBACK_MESSAGES = {
    Action.DECREASE_DIFFICULTY: "Let's build a stronger foundation first! 💪",
    Action.INCREASE_DIFFICULTY: "Great job! Ready for a bigger challenge? 🚀",
    Action.ADVANCE_CHAPTER: "Excellent! You've mastered this chapter! 🎉",
    Action.MAINTAIN_DIFFICULTY: "Keep going! You're making good progress! 📈",
    Action.REPEAT_CURRENT: "Practice makes perfect! Let's strengthen your understanding. 📚",
}
DEFAULT_FEEDBACK = "Keep learning! 👍"

DEFAULT_TOPIC = "Geometry"

# gen_d3_circle_area_1700000000000_42 -> "circle_area"
TEMPLATE_ID_RE = re.compile(r"^gen_d\d+_([a-z_]+?)_\d+_\d+$")


def get_feedback_message(action: Action) -> str:
    return FEEDBACK_MESSAGES.get(action, DEFAULT_FEEDBACK)


def question_topic(question_id: Optional[str], fallback: Optional[str] = None) -> str:
    """Topic of the answered question: template type from the id, else the client topic."""
    match = TEMPLATE_ID_RE.match(question_id or "")
    if match:
        return match.group(1).replace("_", " ")
    return fallback or DEFAULT_TOPIC


def mastery_band(mastery_level: float) -> int:
    """Map 0-100 mastery onto the 0-5 scale used in hint prompts."""
    for threshold, band in ((90, 5), (75, 4), (60, 3), (40, 2), (20, 1)):
        if mastery_level >= threshold:
            return band
    return 0


class AdaptiveTutoringEngine:
    """Adaptive difficulty and gated AI support for geometry practice."""

    def __init__(
        self,
        repo: AdaptiveLearningRepository,
        config: Optional[TutorConfig] = None,
        gate: Optional[HintGate] = None,
        template_generator: Optional[TemplateQuestionGenerator] = None,
    ):
        self.repo = repo
        self.config = config or TutorConfig.from_env()
        self.gate = gate or HintGate.from_config(self.config)
        self.templates = template_generator or TemplateQuestionGenerator()

        self.tracker = PerformanceTracker()
        self.policy = PolicyEngine()
        self.adapter = DifficultyAdapter()
        self.rewards = RewardCalculator()

        logger.info("Adaptive tutoring engine ready", self.config.describe())

    async def _load_state(self, user_id: str, chapter_id: str) -> StudentDifficultyState:
        state = await self.repo.get_student_difficulty(user_id, chapter_id)
        if state is None:
            state = await self.repo.create_student_difficulty(user_id, chapter_id)
        return state

    async def _practiced_topics(self, user_id: str) -> List[str]:
        """Topics the student has worked on; empty if the lookup fails."""
        try:
            return await self.repo.get_practiced_topics(user_id)
        except Exception as e:
            logger.warning(f"Could not load practiced topics for {user_id}: {e}")
            return []

    async def submit_answer(self, submission: AnswerSubmission) -> AnswerResult:
        """
        Process one answer.

        Raises:
            Whatever the repository raises while logging the transition.
        """
        prev_state = await self._load_state(submission.user_id, submission.chapter_id)

        # 1. Fold the answer into the metrics and persist them
        performance_state = self.tracker.record_answer(prev_state, submission.is_correct)
        await self.repo.update_student_difficulty(performance_state)

        # 2. Choose an action
        decision = self.policy.decide(performance_state)

        # 3. Adjust difficulty, persisting only a changed level
        new_state = replace(performance_state)
        adjustment = self.adapter.check_adjustment(new_state.difficulty_level, decision.action)
        difficulty_changed = self.adapter.apply_adjustment(new_state, adjustment)
        if difficulty_changed:
            await self.repo.update_student_difficulty(new_state)

        # 4. Reward is measured at the level the answer was given
        reward = self.rewards.calculate(prev_state, performance_state, decision.action)

        session_id = submission.session_id or str(uuid.uuid4())
        transition = StateTransition(
            user_id=submission.user_id,
            chapter_id=submission.chapter_id,
            question_id=submission.question_id,
            prev_state=prev_state.snapshot(),
            action=decision.action.value,
            action_reason=decision.reason,
            new_state=new_state.snapshot(),
            reward=reward,
            was_correct=submission.is_correct,
            time_spent=submission.time_spent,
            session_id=session_id,
        )
        await self.repo.log_state_transition(transition)

        logger.decision(
            decision.action.value,
            decision.reason,
            before=prev_state.snapshot(),
            after=new_state.snapshot(),
            reward=reward,
        )
        logger.debug(f"Reward {reward} ({get_reward_label(reward)})")

        hint = None
        if not submission.is_correct and submission.question_text:
            hint = await self.request_hint(HintRequest(
                question_text=submission.question_text,
                topic=question_topic(submission.question_id, submission.topic),
                difficulty_level=prev_state.difficulty_level,
                wrong_streak=performance_state.wrong_streak,
                current_action=decision.action.value,
                representation_type=submission.representation_type,
                mastery_level=mastery_band(performance_state.mastery_level),
                unlocked_concepts=await self._practiced_topics(submission.user_id),
            ))

        return AnswerResult(
            success=True,
            difficulty_level=new_state.difficulty_level,
            difficulty_label=new_state.difficulty_label,
            mastery_level=round(new_state.mastery_level, 2),
            action=decision.action.value,
            reason=decision.reason,
            feedback=get_feedback_message(decision.action),
            reward=reward,
            difficulty_changed=difficulty_changed,
            transition_id=transition.id,
            session_id=session_id,
            hint=hint,
        )

    async def request_hint(self, request: HintRequest) -> HintResponse:
        response = await self.gate.generate_hint(request)
        logger.info(f"Hint served (source={response.source}): {response.reason}")
        return response

    async def next_question(self, request: QuestionGenerationRequest, chapter_id: str) -> QuestionResult:
        """AI question for difficulty 4-5 when available, otherwise a template question."""
        question = await self.gate.generate_question(request)
        if question is not None:
            return QuestionResult(
                question=question,
                source=question.source,
                reason=f"AI question at difficulty {request.difficulty_level}",
            )

        question = self.templates.generate(request.difficulty_level, chapter_id)
        return QuestionResult(
            question=question,
            source="template",
            reason=f"Template question at difficulty {request.difficulty_level}",
        )

    async def get_research_stats(self, chapter_id: Optional[str] = None) -> Dict[str, Any]:
        return await self.repo.get_research_statistics(chapter_id)

    async def get_performance_history(
        self, user_id: str, chapter_id: Optional[str] = None, limit: int = 50
    ) -> List[Dict[str, Any]]:
        return await self.repo.get_performance_history(user_id, chapter_id, limit)

    def get_ai_usage(self) -> Dict[str, Any]:
        """Rate-limit and cache status for the hint and question paths."""
        return self.gate.get_usage()
