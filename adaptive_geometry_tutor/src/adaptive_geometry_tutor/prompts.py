"""
Prompt builders for AI hints and AI-generated questions.
"""

from typing import List, Optional

HINT_SYSTEM_PROMPT = (
    "You are a patient geometry tutor for elementary students (Grade 4-6). "
    "Give SHORT, concrete hints without solving the problem. "
    "Use simple words and visual language."
)

QUESTION_SYSTEM_PROMPT = (
    "You are an expert geometry teacher. Return only valid JSON."
)

REPRESENTATION_GUIDANCE = {
    "text": "Use symbolic/algebraic language",
    "visual": "Describe what they should visualize or draw",
    "real_world": "Give a concrete, everyday example",
}

COGNITIVE_DOMAINS = {
    "knowledge_recall": "Recalling basic facts and formulas",
    "concept_understanding": "Understanding relationships between geometric concepts",
    "procedural_skills": "Applying step-by-step procedures",
    "analytical_thinking": "Analyzing complex shapes and multi-step problems",
    "problem_solving": "Solving real-world geometry problems",
    "higher_order_thinking": "Creative reasoning and advanced problem-solving",
}


def _mastery_guidance(mastery_level: int) -> str:
    if mastery_level <= 1:
        return "NOVICE - explain basics with concrete examples"
    if mastery_level == 2:
        return "BEGINNER - build on fundamentals gently"
    return "DEVELOPING+ - guide self-discovery"


def build_hint_prompt(
    question_text: str,
    topic: str,
    difficulty_level: int,
    representation_type: str,
    wrong_streak: int,
    mastery_level: Optional[int] = None,
    unlocked_concepts: Optional[List[str]] = None,
) -> str:
    """Hint prompt constrained to concepts the student has already unlocked."""
    representation = REPRESENTATION_GUIDANCE.get(representation_type, REPRESENTATION_GUIDANCE["text"])
    mastery = mastery_level or 0

    if unlocked_concepts:
        constraint = (
            f"ONLY use these unlocked concepts: {', '.join(unlocked_concepts)}. "
            "NEVER mention future topics."
        )
    else:
        constraint = f"Focus ONLY on: {topic}. DO NOT introduce advanced concepts not yet learned."

    return f"""A student has gotten {wrong_streak} consecutive wrong answers on this geometry question. They need a gentle hint (NOT the answer).

**Topic**: {topic}
**Difficulty**: {difficulty_level}/5 | **Mastery**: {mastery}/5 ({_mastery_guidance(mastery)})
**Question**: {question_text}
**Representation**: {representation}

**CONSTRAINTS**: {constraint}

Give a SHORT hint (1-2 sentences max) that:
1. {representation}
2. Reminds them of the key concept or formula
3. Uses grade-school language (avoid words like "perpendicular", say "straight up and down")
4. Is encouraging

Do NOT solve the problem. Do NOT give the answer."""


def difficulty_description(difficulty_level: int) -> str:
    if difficulty_level >= 5:
        return "Very challenging, requiring multi-step reasoning and creative problem-solving"
    return "Challenging, requiring analytical thinking and complex calculations"


def cognitive_domain_description(domain: str) -> str:
    return COGNITIVE_DOMAINS.get(domain, "Advanced geometric reasoning")


def focus_subtopics(topic_filter: Optional[str]) -> List[str]:
    """'area_of_triangles|perimeter' -> ['area of triangles', 'perimeter']"""
    if not topic_filter:
        return []
    return [part.strip().replace("_", " ") for part in topic_filter.split("|") if part.strip()]


def build_question_prompt(
    topic: str,
    difficulty_level: int,
    cognitive_domain: str,
    topic_filter: Optional[str] = None,
) -> str:
    """Question prompt asking for strict JSON with exactly 4 options."""
    subtopics = focus_subtopics(topic_filter)
    focus_line = f"FOCUS SUBTOPICS: {', '.join(subtopics)}\n" if subtopics else ""

    return f"""You are an expert geometry teacher creating a {difficulty_description(difficulty_level)} question for elementary students.

TOPIC: {topic}
{focus_line}DIFFICULTY LEVEL: {difficulty_level}/5
COGNITIVE DOMAIN: {cognitive_domain} - {cognitive_domain_description(cognitive_domain)}

Create a geometry question that:
1. Is appropriate for the topic and difficulty level
2. Has EXACTLY 4 multiple choice options (A, B, C, D)
3. Has only ONE correct answer
4. Includes a helpful hint for struggling students
5. Uses clear, child-friendly language
6. Involves interesting scenarios (real-world contexts preferred)

CORRECTNESS RULES:
- Work out the answer step by step before writing the options
- The correct option MUST equal the result of the formula applied to the numbers in the question
- All 4 option texts must be different
- Include units in every numeric option

Return ONLY valid JSON, nothing else. No markdown, no extra text. Use this exact format and escape all quotes inside strings:
{{
  "questionText": "The complete question text",
  "options": [
    {{"label": "A", "text": "First option", "correct": false}},
    {{"label": "B", "text": "Second option", "correct": true}},
    {{"label": "C", "text": "Third option", "correct": false}},
    {{"label": "D", "text": "Fourth option", "correct": false}}
  ],
  "correctAnswer": "B",
  "hint": "A helpful hint",
  "explanation": "Why this is correct"
}}"""
