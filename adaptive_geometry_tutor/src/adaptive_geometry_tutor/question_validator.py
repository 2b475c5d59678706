"""
AI Question Validation

Checks run in order; the first failure rejects the question:
1. exactly 4 options
2. exactly 1 option marked correct (correctAnswer label is fixed to match it)
3. option texts distinct after trim/lowercase
4. arithmetic: for recognised volume/area/perimeter questions the correct
   option must match the formula result within a small tolerance

Questions the arithmetic check cannot interpret (unknown shape, too few
numbers, non-numeric answer) pass that step.
"""

import re
import math
import logging
from dataclasses import dataclass
from typing import List, Optional

from adaptive_geometry_tutor.schemas import GeneratedQuestion

logger = logging.getLogger(__name__)

AREA_VOLUME_TOLERANCE = 1.0
PERIMETER_TOLERANCE = 0.1

NUMBER_RE = re.compile(r"\d+(?:,\d{3})*(?:\.\d+)?")
WORD_RE = re.compile(r"[a-zA-Z]+")
# Letters that may follow a dimension without a space, e.g. "5cm", "4x6"
ATTACHED_SUFFIXES = {"cm", "mm", "m", "km", "in", "ft", "yd", "units", "unit", "x"}
LABEL_BEFORE_RE = re.compile(r"(?:\b(?:question|problem|step|part|grade|no\.?)|#)\s*$", re.IGNORECASE)
# "square" used as a unit, not as the shape
SQUARE_UNIT_RE = re.compile(
    r"square\s+(?:units?|meters?|metres?|centimeters?|centimetres?|cm|mm|m|feet|foot|ft|inches|inch|in|yards?|kilometers?|km)\b"
)
REGULAR_POLYGON_SIDES = {
    "pentagon": 5,
    "hexagon": 6,
    "heptagon": 7,
    "octagon": 8,
    "nonagon": 9,
    "decagon": 10,
}


@dataclass
class ValidationResult:
    valid: bool
    reason: str = "ok"


def extract_numbers(text: str) -> List[float]:
    """
    Dimension values in text.

    Skips 3.14 used as an approximation of pi, numbers glued to a non-unit
    word ("2D", "3rd") and numbers that label the question ("Question 3").
    """
    values = []
    for match in NUMBER_RE.finditer(text):
        raw = match.group(0)
        if raw == "3.14":
            continue
        suffix = WORD_RE.match(text, match.end())
        if suffix and suffix.group(0).lower() not in ATTACHED_SUFFIXES:
            continue
        if LABEL_BEFORE_RE.search(text, 0, match.start()):
            continue
        values.append(float(raw.replace(",", "")))
    return values


def _first_number(text: str) -> Optional[float]:
    match = NUMBER_RE.search(text)
    return float(match.group(0).replace(",", "")) if match else None


@dataclass
class _Expectation:
    shape: str
    candidates: List[float]
    tolerance: float


class QuestionValidator:
    """Structural and arithmetic validation of AI-generated questions."""

    def validate(self, question: GeneratedQuestion) -> ValidationResult:
        for check in (self.check_structure, self.check_distinct_options, self.check_arithmetic):
            result = check(question)
            if not result.valid:
                logger.warning(f"⚠️ [QuestionValidator] Rejected: {result.reason}")
                return result
        return ValidationResult(valid=True)

    def check_structure(self, question: GeneratedQuestion) -> ValidationResult:
        if len(question.options) != 4:
            return ValidationResult(False, f"Expected 4 options, got {len(question.options)}")

        correct_options = [option for option in question.options if option.correct]
        if len(correct_options) != 1:
            return ValidationResult(False, f"Expected exactly 1 correct option, got {len(correct_options)}")

        correct_label = correct_options[0].label
        if question.correct_answer != correct_label:
            logger.info(
                f"[QuestionValidator] correctAnswer '{question.correct_answer}' "
                f"does not match marked option '{correct_label}', fixing"
            )
            question.correct_answer = correct_label

        return ValidationResult(valid=True)

    def check_distinct_options(self, question: GeneratedQuestion) -> ValidationResult:
        normalized = [option.text.strip().lower() for option in question.options]
        if len(set(normalized)) != len(normalized):
            return ValidationResult(False, "Duplicate option texts")
        return ValidationResult(valid=True)

    def check_arithmetic(self, question: GeneratedQuestion) -> ValidationResult:
        correct = question.correct_option()
        if correct is None:
            return ValidationResult(valid=True)

        answer = _first_number(correct.text)
        if answer is None:
            return ValidationResult(valid=True)

        expectation = self.expected_value(question.question_text)
        if expectation is None:
            return ValidationResult(valid=True)

        if any(abs(answer - candidate) <= expectation.tolerance for candidate in expectation.candidates):
            return ValidationResult(valid=True)

        expected = ", ".join(f"{value:.2f}" for value in expectation.candidates)
        return ValidationResult(
            False,
            f"Arithmetic mismatch for {expectation.shape}: answer {answer:g}, expected {expected}",
        )

    def expected_value(self, question_text: str) -> Optional[_Expectation]:
        """Formula result for a recognised question, or None if it cannot be checked."""
        text = question_text.lower()
        numbers = extract_numbers(text)
        if not numbers:
            return None

        mentions_area = "area" in text
        mentions_perimeter = "perimeter" in text

        if "volume" in text:
            return self._expected_volume(text, numbers)
        if mentions_area and mentions_perimeter:
            return None
        if mentions_area and "surface area" not in text:
            return self._expected_area(text, numbers)
        if mentions_perimeter:
            return self._expected_perimeter(text, numbers)
        return None

    def _pi_candidates(self, text: str, factor: float) -> List[float]:
        candidates = [math.pi * factor]
        if "3.14" in text:
            candidates.append(3.14 * factor)
        return candidates

    def _expected_volume(self, text: str, numbers: List[float]) -> Optional[_Expectation]:
        if "rectangular prism" in text or "box" in text:
            if len(numbers) < 3:
                return None
            length, width, height = numbers[:3]
            return _Expectation("rectangular prism volume", [length * width * height], AREA_VOLUME_TOLERANCE)

        if "cylinder" in text:
            if len(numbers) < 2:
                return None
            radius = numbers[0] / 2 if "diameter" in text else numbers[0]
            height = numbers[1]
            return _Expectation(
                "cylinder volume",
                self._pi_candidates(text, radius * radius * height),
                AREA_VOLUME_TOLERANCE,
            )

        if "cube" in text:
            side = numbers[0]
            return _Expectation("cube volume", [side ** 3], AREA_VOLUME_TOLERANCE)

        return None

    def _expected_area(self, text: str, numbers: List[float]) -> Optional[_Expectation]:
        shape_text = SQUARE_UNIT_RE.sub("", text)

        if "trapezoid" in shape_text:
            if len(numbers) < 3:
                return None
            base_a, base_b, height = numbers[:3]
            return _Expectation("trapezoid area", [(base_a + base_b) / 2 * height], AREA_VOLUME_TOLERANCE)

        if "parallelogram" in shape_text:
            if len(numbers) < 2:
                return None
            return _Expectation("parallelogram area", [numbers[0] * numbers[1]], AREA_VOLUME_TOLERANCE)

        if "rectangle" in shape_text or "rectangular" in shape_text:
            if len(numbers) < 2:
                return None
            return _Expectation("rectangle area", [numbers[0] * numbers[1]], AREA_VOLUME_TOLERANCE)

        if "triangle" in shape_text:
            if len(numbers) < 2:
                return None
            return _Expectation("triangle area", [0.5 * numbers[0] * numbers[1]], AREA_VOLUME_TOLERANCE)

        if "circle" in shape_text:
            radius = numbers[0] / 2 if "diameter" in shape_text else numbers[0]
            return _Expectation("circle area", self._pi_candidates(text, radius * radius), AREA_VOLUME_TOLERANCE)

        if "square" in shape_text:
            return _Expectation("square area", [numbers[0] ** 2], AREA_VOLUME_TOLERANCE)

        return None

    def _expected_perimeter(self, text: str, numbers: List[float]) -> Optional[_Expectation]:
        shape_text = SQUARE_UNIT_RE.sub("", text)

        if "rectangle" in shape_text or "rectangular" in shape_text:
            if len(numbers) < 2:
                return None
            return _Expectation("rectangle perimeter", [2 * (numbers[0] + numbers[1])], PERIMETER_TOLERANCE)

        if "triangle" in shape_text:
            if len(numbers) >= 3:
                return _Expectation("triangle perimeter", [sum(numbers[:3])], PERIMETER_TOLERANCE)
            if "equilateral" in shape_text:
                return _Expectation("triangle perimeter", [3 * numbers[0]], PERIMETER_TOLERANCE)
            return None

        for polygon, sides in REGULAR_POLYGON_SIDES.items():
            if polygon in shape_text:
                return _Expectation(f"{polygon} perimeter", [sides * numbers[0]], PERIMETER_TOLERANCE)

        if "square" in shape_text:
            return _Expectation("square perimeter", [4 * numbers[0]], PERIMETER_TOLERANCE)

        return None
