"""
AI Question Response Parsing

LLM output is not always valid JSON. Parsing runs an ordered list of
strategies, each returning a payload dict or None:

1. FencedJSONStrategy     - strip ``` fences, parse the whole text
2. BracedSubstringStrategy - parse the text between the first '{' and the last '}'
3. FieldExtractionStrategy - pull each field out with targeted patterns

The first strategy that produces a payload decides; if that payload is
missing a required field the response is rejected. Nothing here raises;
an unusable response comes back as None.
"""

import re
import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from adaptive_geometry_tutor.schemas import GeneratedQuestion

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("questionText", "options", "correctAnswer", "hint")
DEFAULT_HINT = "Try breaking down the problem"


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"```(?:json)?\s*", "", cleaned)
    return cleaned.strip()


class ParseStrategy:
    name = "strategy"

    def parse(self, text: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class FencedJSONStrategy(ParseStrategy):
    name = "direct_json"

    def parse(self, text: str) -> Optional[Dict[str, Any]]:
        try:
            payload = json.loads(strip_code_fences(text))
        except (json.JSONDecodeError, TypeError):
            return None
        return payload if isinstance(payload, dict) else None


class BracedSubstringStrategy(ParseStrategy):
    name = "braced_substring"

    def parse(self, text: str) -> Optional[Dict[str, Any]]:
        cleaned = strip_code_fences(text)
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            payload = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError:
            return None
        return payload if isinstance(payload, dict) else None


class FieldExtractionStrategy(ParseStrategy):
    """Last resort for JSON with unescaped quotes or trailing junk."""

    name = "field_extraction"

    QUESTION_RE = re.compile(r'"questionText"\s*:\s*"(.*?)"\s*,\s*"', re.DOTALL)
    HINT_RE = re.compile(r'"hint"\s*:\s*"(.*?)"\s*[,}]', re.DOTALL)
    ANSWER_RE = re.compile(r'"correctAnswer"\s*:\s*"([A-D])"')
    OPTIONS_RE = re.compile(r'"options"\s*:\s*\[(.*?)\]', re.DOTALL)
    OPTION_RE = re.compile(
        r'\{[^}]*?"label"\s*:\s*"([A-D])"[^}]*?"text"\s*:\s*"([^"]*)"[^}]*?"correct"\s*:\s*(true|false)[^}]*\}'
    )

    def parse(self, text: str) -> Optional[Dict[str, Any]]:
        cleaned = strip_code_fences(text)

        question_match = self.QUESTION_RE.search(cleaned)
        answer_match = self.ANSWER_RE.search(cleaned)
        if not question_match or not answer_match:
            return None

        hint_match = self.HINT_RE.search(cleaned)
        hint = hint_match.group(1).replace('\\"', '"') if hint_match else DEFAULT_HINT

        options: List[Dict[str, Any]] = []
        options_match = self.OPTIONS_RE.search(cleaned)
        if options_match:
            for label, option_text, correct in self.OPTION_RE.findall(options_match.group(1)):
                options.append({"label": label, "text": option_text, "correct": correct == "true"})

        if len(options) != 4:
            return None

        return {
            "questionText": question_match.group(1).replace('\\"', '"'),
            "options": options,
            "correctAnswer": answer_match.group(1),
            "hint": hint,
        }


DEFAULT_STRATEGIES = (FencedJSONStrategy(), BracedSubstringStrategy(), FieldExtractionStrategy())


def _has_required_fields(payload: Dict[str, Any]) -> bool:
    return all(payload.get(name) for name in REQUIRED_FIELDS)


class QuestionResponseParser:
    """Chain of parse strategies over raw LLM text."""

    def __init__(self, strategies=DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    def parse_payload(self, text: str) -> Optional[Dict[str, Any]]:
        if not text or not text.strip():
            return None

        for strategy in self.strategies:
            payload = strategy.parse(text)
            if payload is None:
                logger.debug(f"[QuestionParser] {strategy.name} found nothing")
                continue
            # A payload that parsed but lacks fields is final; later strategies only recover syntax
            if not _has_required_fields(payload):
                logger.warning(f"⚠️ [QuestionParser] {strategy.name}: missing required fields")
                return None
            logger.debug(f"[QuestionParser] Parsed with {strategy.name}")
            return payload

        return None

    def parse(self, text: str) -> Optional[GeneratedQuestion]:
        """
        Parse raw LLM text into a GeneratedQuestion.

        Returns:
            GeneratedQuestion, or None if no strategy produced a usable payload
        """
        payload = self.parse_payload(text)
        if payload is None:
            logger.error("❌ [QuestionParser] Could not parse AI response")
            return None

        try:
            return GeneratedQuestion.model_validate(payload)
        except ValidationError as e:
            logger.error(f"❌ [QuestionParser] Malformed question payload: {e.error_count()} error(s)")
            return None
