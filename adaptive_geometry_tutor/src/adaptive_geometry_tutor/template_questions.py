"""
Parametric Question Templates

Instead of storing thousands of questions, templates are filled with random
integer parameters on the fly. Used for difficulty 1-3 and whenever AI
question generation is unavailable.
"""

import math
import time
import random
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from adaptive_geometry_tutor.schemas import AnswerOption, GeneratedQuestion

logger = logging.getLogger(__name__)

OPTION_LABELS = ("A", "B", "C", "D")

Params = Dict[str, int]

# Value the "(Use π ≈ 3.14)" templates tell students to use
PI_APPROX = 3.14


@dataclass(frozen=True)
class QuestionTemplate:
    type: str
    template: str
    params: Tuple[Tuple[str, int, int], ...]  # (name, min, max) in generation order
    solution: Callable[[Params], float]
    hint: str
    # Caps a parameter's max from already-generated ones, e.g. width < diameter
    constraints: Tuple[Tuple[str, Callable[[Params], int]], ...] = ()


def _composite_area(p: Params) -> float:
    radius = p["width"] / 2
    return p["length"] * p["width"] + 0.5 * math.pi * radius * radius


def _cylinder_with_hemisphere(p: Params) -> float:
    cylinder = math.pi * p["radius"] ** 2 * p["height"]
    hemisphere = (2 / 3) * math.pi * p["radius"] ** 3
    return cylinder + hemisphere


def _inscribed_rectangle_area(p: Params) -> float:
    # Diagonal of the rectangle is the circle's diameter
    diameter = 2 * p["radius"]
    height = math.sqrt(diameter * diameter - p["width"] * p["width"])
    return p["width"] * height


TEMPLATES: Dict[int, List[QuestionTemplate]] = {
    # Very Easy: basic shapes, single step
    1: [
        QuestionTemplate(
            type="rectangle_area",
            template="Calculate the area of a rectangle with width {width} units and height {height} units.",
            params=(("width", 3, 10), ("height", 3, 10)),
            solution=lambda p: p["width"] * p["height"],
            hint="Area = Width × Height",
        ),
        QuestionTemplate(
            type="square_perimeter",
            template="Find the perimeter of a square with side length {side} units.",
            params=(("side", 4, 12),),
            solution=lambda p: 4 * p["side"],
            hint="Perimeter = 4 × side",
        ),
        QuestionTemplate(
            type="circle_area",
            template="Calculate the area of a circle with radius {radius} units. (Use π ≈ 3.14)",
            params=(("radius", 2, 8),),
            solution=lambda p: PI_APPROX * p["radius"] ** 2,
            hint="Area = π × r²",
        ),
    ],
    # Easy: simple multi-step
    2: [
        QuestionTemplate(
            type="rectangle_perimeter",
            template="A rectangle has length {length} units and width {width} units. Find its perimeter.",
            params=(("length", 8, 20), ("width", 5, 15)),
            solution=lambda p: 2 * (p["length"] + p["width"]),
            hint="Perimeter = 2 × (length + width)",
        ),
        QuestionTemplate(
            type="triangle_area",
            template="Calculate the area of a triangle with base {base} units and height {height} units.",
            params=(("base", 6, 16), ("height", 4, 12)),
            solution=lambda p: 0.5 * p["base"] * p["height"],
            hint="Area = ½ × base × height",
        ),
        QuestionTemplate(
            type="circle_circumference",
            template="Find the circumference of a circle with radius {radius} units. (Use π ≈ 3.14)",
            params=(("radius", 5, 15),),
            solution=lambda p: 2 * PI_APPROX * p["radius"],
            hint="Circumference = 2 × π × r",
        ),
    ],
    # Medium: multiple concepts
    3: [
        QuestionTemplate(
            type="composite_area",
            template=(
                "A shape consists of a rectangle (length {length}, width {width}) with a semicircle "
                "on top (diameter = width). Find the total area."
            ),
            params=(("length", 10, 20), ("width", 8, 16)),
            solution=_composite_area,
            hint="Total Area = Rectangle Area + Semicircle Area",
        ),
        QuestionTemplate(
            type="pythagorean",
            template="A right triangle has legs of length {a} units and {b} units. Find the length of the hypotenuse.",
            params=(("a", 3, 12), ("b", 4, 12)),
            solution=lambda p: math.sqrt(p["a"] ** 2 + p["b"] ** 2),
            hint="Use Pythagorean theorem: c² = a² + b²",
        ),
        QuestionTemplate(
            type="trapezoid_area",
            template=(
                "Find the area of a trapezoid with parallel sides {base1} and {base2} units, "
                "and height {height} units."
            ),
            params=(("base1", 8, 16), ("base2", 12, 20), ("height", 6, 12)),
            solution=lambda p: 0.5 * (p["base1"] + p["base2"]) * p["height"],
            hint="Area = ½ × (base₁ + base₂) × height",
        ),
    ],
    # Hard: advanced reasoning
    4: [
        QuestionTemplate(
            type="similar_triangles",
            template=(
                "Two similar triangles have corresponding sides in ratio {ratio}:1. If the smaller "
                "triangle has area {smallArea} square units, find the area of the larger triangle."
            ),
            params=(("ratio", 2, 4), ("smallArea", 10, 30)),
            solution=lambda p: p["smallArea"] * p["ratio"] ** 2,
            hint="Area ratio = (side ratio)²",
        ),
        QuestionTemplate(
            type="circle_sector",
            template="Find the area of a circular sector with radius {radius} units and central angle {angle}°.",
            params=(("radius", 8, 15), ("angle", 60, 180)),
            solution=lambda p: (p["angle"] / 360) * math.pi * p["radius"] ** 2,
            hint="Sector Area = (angle/360) × πr²",
        ),
        QuestionTemplate(
            type="annulus_area",
            template=(
                "Find the area between two concentric circles with outer radius {outer} units "
                "and inner radius {inner} units."
            ),
            params=(("outer", 10, 20), ("inner", 5, 9)),
            solution=lambda p: math.pi * (p["outer"] ** 2 - p["inner"] ** 2),
            hint="Area = π(R² - r²)",
        ),
    ],
    # Very Hard: complex problems
    5: [
        QuestionTemplate(
            type="volume_composite",
            template=(
                "A cylindrical tank (radius {radius} units, height {height} units) is topped with "
                "a hemisphere. Find the total volume."
            ),
            params=(("radius", 5, 12), ("height", 10, 25)),
            solution=_cylinder_with_hemisphere,
            hint="Volume = Cylinder + Hemisphere",
        ),
        QuestionTemplate(
            type="optimization",
            template=(
                "A rectangle is inscribed in a circle of radius {radius} units. If the rectangle "
                "has width {width} units, find its area."
            ),
            params=(("radius", 10, 15), ("width", 12, 20)),
            solution=_inscribed_rectangle_area,
            hint="Diagonal of rectangle = Diameter of circle",
            constraints=(("width", lambda p: 2 * p["radius"] - 2),),
        ),
    ],
}


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def round_solution(value: float) -> float:
    return round(value * 100) / 100


class TemplateQuestionGenerator:
    """Generates multiple-choice questions from parametric templates."""

    DISTRACTOR_FACTORS = (0.5, 0.75, 1.25, 1.5, 2.0)

    def __init__(self, templates: Optional[Dict[int, List[QuestionTemplate]]] = None):
        self.templates = templates if templates is not None else TEMPLATES

    def generate(self, difficulty_level: int, chapter_id: str, seed: Optional[int] = None) -> GeneratedQuestion:
        """
        Generate a random question at the given difficulty.

        Args:
            difficulty_level: 1-5
            chapter_id: Chapter the question belongs to
            seed: Makes the question reproducible

        Raises:
            ValueError: if no templates exist for the difficulty level
        """
        templates = self.templates.get(difficulty_level)
        if not templates:
            raise ValueError(f"No templates available for difficulty {difficulty_level}")

        rng = random.Random(seed)
        template = rng.choice(templates)
        params = self._generate_parameters(template, rng)
        solution = round_solution(template.solution(params))

        question_text = template.template
        for name, value in params.items():
            question_text = question_text.replace("{" + name + "}", str(value))

        options, correct_label = self._build_options(solution, rng)
        suffix = seed if seed is not None else rng.randint(0, 9999)
        question_id = f"gen_d{difficulty_level}_{template.type}_{int(time.time() * 1000)}_{suffix}"

        logger.debug(f"[TemplateQuestions] {question_id}: solution={solution}")

        return GeneratedQuestion(
            question_text=question_text,
            options=options,
            correct_answer=correct_label,
            hint=template.hint,
            id=question_id,
            source="template",
            difficulty_level=difficulty_level,
            metadata={
                "type": template.type,
                "chapter_id": chapter_id,
                "parameters": params,
                "solution": solution,
            },
        )

    def generate_many(self, difficulty_level: int, chapter_id: str, count: int = 10) -> List[GeneratedQuestion]:
        return [self.generate(difficulty_level, chapter_id, seed=i) for i in range(count)]

    def _generate_parameters(self, template: QuestionTemplate, rng: random.Random) -> Params:
        caps = dict(template.constraints)
        params: Params = {}
        for name, low, high in template.params:
            if name in caps:
                high = max(low, min(high, caps[name](params)))
            params[name] = rng.randint(low, high)
        return params

    def _build_options(self, solution: float, rng: random.Random) -> Tuple[List[AnswerOption], str]:
        correct_text = format_number(solution)
        seen = {correct_text}
        distractors: List[str] = []

        candidates = [solution * factor for factor in self.DISTRACTOR_FACTORS]
        rng.shuffle(candidates)
        step = 1
        while len(distractors) < 3:
            if candidates:
                value = round_solution(candidates.pop())
            else:
                value = solution + step
                step += 1
            text = format_number(value)
            if value > 0 and text not in seen:
                seen.add(text)
                distractors.append(text)

        texts = distractors + [correct_text]
        rng.shuffle(texts)

        options = [
            AnswerOption(label=label, text=text, correct=(text == correct_text))
            for label, text in zip(OPTION_LABELS, texts)
        ]
        correct_label = next(option.label for option in options if option.correct)
        return options, correct_label

    def get_template_stats(self) -> Dict[str, Dict]:
        """Statistics about available templates."""
        return {
            f"difficulty_{level}": {
                "count": len(templates),
                "types": [template.type for template in templates],
            }
            for level, templates in self.templates.items()
        }
