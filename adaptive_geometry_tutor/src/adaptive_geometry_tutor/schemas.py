"""
Request/response models for the tutoring engine.
"""

from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnswerOption(BaseModel):
    label: str
    text: str
    correct: bool = False

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        # AI payloads sometimes send bare numbers as option text
        return value if isinstance(value, str) else str(value)


class GeneratedQuestion(BaseModel):
    """Multiple-choice question produced by the AI provider or a template."""
    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(alias="questionText")
    options: List[AnswerOption]
    correct_answer: str = Field(alias="correctAnswer")
    hint: str
    explanation: Optional[str] = None
    id: Optional[str] = None
    source: str = "ai"
    difficulty_level: Optional[int] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def correct_option(self) -> Optional[AnswerOption]:
        for option in self.options:
            if option.correct:
                return option
        return None


class AnswerSubmission(BaseModel):
    user_id: str
    chapter_id: str
    question_id: str
    is_correct: bool
    time_spent: float = 0.0
    session_id: Optional[str] = None
    # Used to attach a hint when the answer is wrong
    question_text: Optional[str] = None
    topic: Optional[str] = None
    representation_type: str = "text"


class AnswerResult(BaseModel):
    success: bool
    difficulty_level: int
    difficulty_label: str
    mastery_level: float
    action: str
    reason: str
    feedback: str
    reward: int
    difficulty_changed: bool = False
    transition_id: Optional[str] = None
    session_id: Optional[str] = None
    hint: Optional["HintResponse"] = None


class HintRequest(BaseModel):
    question_text: str
    topic: str
    difficulty_level: int = Field(default=1, ge=1, le=5)
    wrong_streak: int = Field(default=0, ge=0)
    current_action: Optional[str] = None
    representation_type: str = "text"  # text / visual / real_world
    mastery_level: Optional[int] = Field(default=None, ge=0, le=5)
    unlocked_concepts: List[str] = Field(default_factory=list)


class HintResponse(BaseModel):
    hint: str
    source: str  # rule, ai, ai-cached, rule-fallback
    reason: str


class QuestionGenerationRequest(BaseModel):
    topic: str
    topic_filter: Optional[str] = None  # "|"-separated subtopic keywords
    difficulty_level: int = Field(ge=1, le=5)
    cognitive_domain: str = "problem_solving"
    exclude_ids: List[str] = Field(default_factory=list)


class QuestionResult(BaseModel):
    question: GeneratedQuestion
    source: str  # ai, ai-cached, template
    reason: str


AnswerResult.model_rebuild()
