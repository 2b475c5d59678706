"""
Unit Tests for Template Question Generator
"""

import math
import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "adaptive_geometry_tutor", "src"))

from adaptive_geometry_tutor.template_questions import (
    TEMPLATES,
    TemplateQuestionGenerator,
    format_number,
    round_solution,
)


class TestTemplateQuestionGenerator:
    """Test suite for TemplateQuestionGenerator."""

    @pytest.fixture
    def generator(self):
        return TemplateQuestionGenerator()

    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5])
    def test_generates_question_for_each_level(self, generator, level):
        question = generator.generate(level, "chapter-1", seed=7)

        assert question.source == "template"
        assert question.difficulty_level == level
        assert question.id.startswith(f"gen_d{level}_")
        assert question.id.endswith("_7")
        assert "{" not in question.question_text
        assert question.hint

    @pytest.mark.parametrize("seed", range(40))
    def test_options_are_valid(self, generator, seed):
        level = seed % 5 + 1
        question = generator.generate(level, "chapter-1", seed=seed)

        texts = [option.text.strip().lower() for option in question.options]
        assert len(question.options) == 4
        assert len(set(texts)) == 4
        assert sum(option.correct for option in question.options) == 1
        assert question.correct_option().label == question.correct_answer

    def test_correct_option_matches_solution(self, generator):
        question = generator.generate(2, "chapter-1", seed=3)

        solution = question.metadata["solution"]
        assert question.correct_option().text == format_number(solution)

    def test_same_seed_is_reproducible(self, generator):
        first = generator.generate(3, "c", seed=42)
        second = generator.generate(3, "c", seed=42)

        assert first.question_text == second.question_text
        assert [o.text for o in first.options] == [o.text for o in second.options]

    def test_unknown_difficulty_raises(self, generator):
        with pytest.raises(ValueError):
            generator.generate(6, "chapter-1")

    def test_solution_values(self):
        rectangle_area = TEMPLATES[1][0]
        assert rectangle_area.solution({"width": 4, "height": 5}) == 20

        circle_area = TEMPLATES[1][2]
        assert round_solution(circle_area.solution({"radius": 2})) == 12.56

        pythagorean = TEMPLATES[3][1]
        assert pythagorean.solution({"a": 3, "b": 4}) == pytest.approx(5.0)

    @pytest.mark.parametrize("template_type", ["circle_area", "circle_circumference"])
    def test_pi_approximation_matches_question_text(self, template_type):
        template = next(t for level in TEMPLATES.values() for t in level if t.type == template_type)
        generator = TemplateQuestionGenerator({1: [template]})

        question = generator.generate(1, "c", seed=5)

        radius = question.metadata["parameters"]["radius"]
        factor = radius * radius if template_type == "circle_area" else 2 * radius
        assert "3.14" in question.question_text
        assert question.correct_option().text == format_number(round_solution(3.14 * factor))

    @pytest.mark.parametrize("seed", range(30))
    def test_inscribed_rectangle_width_fits_circle(self, seed):
        template = next(t for t in TEMPLATES[5] if t.type == "optimization")
        generator = TemplateQuestionGenerator({5: [template]})

        question = generator.generate(5, "c", seed=seed)

        params = question.metadata["parameters"]
        assert params["width"] < 2 * params["radius"]
        assert not math.isnan(question.metadata["solution"])

    def test_generate_many(self, generator):
        questions = generator.generate_many(1, "c", count=5)

        assert len(questions) == 5

    def test_template_stats(self, generator):
        stats = generator.get_template_stats()

        assert stats["difficulty_1"]["count"] == 3
        assert "optimization" in stats["difficulty_5"]["types"]

    def test_format_number(self):
        assert format_number(40.0) == "40"
        assert format_number(12.57) == "12.57"
        assert format_number(12.5) == "12.5"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
