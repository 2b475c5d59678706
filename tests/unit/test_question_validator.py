"""
Unit Tests for Question Validator

Structural checks and the formula-based arithmetic check.
"""

import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "adaptive_geometry_tutor", "src"))

from adaptive_geometry_tutor.question_validator import QuestionValidator, extract_numbers
from adaptive_geometry_tutor.schemas import AnswerOption, GeneratedQuestion


def make_question(text, option_texts, correct_index=1, correct_answer=None):
    labels = ["A", "B", "C", "D", "E"]
    options = [
        AnswerOption(label=labels[i], text=t, correct=(i == correct_index))
        for i, t in enumerate(option_texts)
    ]
    return GeneratedQuestion(
        question_text=text,
        options=options,
        correct_answer=correct_answer or labels[correct_index],
        hint="Use the formula.",
    )


class TestStructuralValidation:
    """Option count, correctness flags and distinct texts."""

    @pytest.fixture
    def validator(self):
        return QuestionValidator()

    def test_valid_question(self, validator):
        question = make_question("Which shape has 3 sides?", ["Square", "Triangle", "Circle", "Pentagon"])

        assert validator.validate(question).valid

    def test_duplicate_option_texts_rejected(self, validator):
        """Scenario F: duplicates after trim/lowercase."""
        question = make_question(
            "Which shape has 3 sides?", ["Square", "Triangle", " triangle ", "Pentagon"]
        )

        result = validator.validate(question)

        assert result.valid is False
        assert "Duplicate" in result.reason

    def test_three_options_rejected(self, validator):
        question = make_question("Which shape has 3 sides?", ["Square", "Triangle", "Circle"])

        assert validator.validate(question).valid is False

    def test_no_correct_option_rejected(self, validator):
        question = make_question("Q", ["a", "b", "c", "d"], correct_index=-1, correct_answer="A")

        result = validator.validate(question)

        assert result.valid is False
        assert "exactly 1 correct" in result.reason

    def test_two_correct_options_rejected(self, validator):
        question = make_question("Q", ["a", "b", "c", "d"])
        question.options[2].correct = True

        assert validator.validate(question).valid is False

    def test_mismatched_label_fixed_to_marked_option(self, validator):
        question = make_question("Which shape has 3 sides?", ["Square", "Triangle", "Circle", "Pentagon"],
                                 correct_index=1, correct_answer="D")

        result = validator.validate(question)

        assert result.valid
        assert question.correct_answer == "B"


class TestArithmeticValidation:
    """Recomputes volume/area/perimeter answers."""

    @pytest.fixture
    def validator(self):
        return QuestionValidator()

    def test_rectangular_prism_volume_correct(self, validator):
        question = make_question(
            "A rectangular prism is 4 cm long, 3 cm wide and 2 cm high. What is its volume?",
            ["9 cubic cm", "24 cubic cm", "20 cubic cm", "12 cubic cm"],
        )
        assert validator.validate(question).valid

    def test_rectangular_prism_volume_wrong(self, validator):
        question = make_question(
            "A rectangular prism is 4 cm long, 3 cm wide and 2 cm high. What is its volume?",
            ["9 cubic cm", "26 cubic cm", "24 cubic cm", "12 cubic cm"],
        )

        result = validator.validate(question)

        assert result.valid is False
        assert "Arithmetic mismatch" in result.reason

    def test_cube_volume(self, validator):
        question = make_question(
            "A cube has edges of 5 cm. What is its volume?",
            ["25", "125", "150", "15"],
        )
        assert validator.validate(question).valid

    def test_cylinder_volume_with_pi_approximation(self, validator):
        # 3.14 * 2^2 * 10 = 125.6
        question = make_question(
            "A cylinder has radius 2 m and height 10 m. Using π = 3.14, what is its volume?",
            ["62.8 m³", "125.6 m³", "40 m³", "251.2 m³"],
        )
        assert validator.validate(question).valid

    def test_cylinder_volume_from_diameter(self, validator):
        # pi * 2^2 * 10 = 125.66
        question = make_question(
            "A cylinder has a diameter of 4 m and a height of 10 m. What is its volume?",
            ["502.65 m³", "125.66 m³", "40 m³", "251.33 m³"],
        )
        assert validator.validate(question).valid

    def test_rectangle_area(self, validator):
        question = make_question(
            "A rectangle is 8 m long and 5 m wide. What is its area?",
            ["13 square meters", "40 square meters", "26 square meters", "45 square meters"],
        )
        assert validator.validate(question).valid

    def test_triangle_area_wrong(self, validator):
        question = make_question(
            "A triangle has base 10 cm and height 6 cm. What is its area?",
            ["30 square cm", "60 square cm", "16 square cm", "36 square cm"],
        )
        assert validator.validate(question).valid is False

    def test_square_units_do_not_mean_square_shape(self, validator):
        # rectangle area 6 * 4 = 24; "square units" must not trigger side^2
        question = make_question(
            "Find the area of a rectangle 6 units by 4 units, in square units.",
            ["10", "24", "36", "20"],
        )
        assert validator.validate(question).valid

    def test_square_perimeter(self, validator):
        question = make_question(
            "A square has a side of 7 cm. What is its perimeter?",
            ["14 cm", "28 cm", "49 cm", "21 cm"],
        )
        assert validator.validate(question).valid

    def test_rectangle_perimeter_tolerance(self, validator):
        question = make_question(
            "A rectangle is 8.5 m by 4 m. What is its perimeter?",
            ["12.5 m", "25.5 m", "34 m", "25 m"],
        )
        # expected 25, tolerance 0.1
        assert validator.validate(question).valid is False

    def test_hexagon_perimeter(self, validator):
        question = make_question(
            "A regular hexagon has sides of 4 cm. What is its perimeter?",
            ["16 cm", "24 cm", "20 cm", "28 cm"],
        )
        assert validator.validate(question).valid

    def test_area_and_perimeter_together_skipped(self, validator):
        question = make_question(
            "A rectangle has perimeter 20 m and area 24 m². What is its length?",
            ["4 m", "6 m", "8 m", "10 m"],
        )
        assert validator.validate(question).valid

    def test_surface_area_not_checked(self, validator):
        question = make_question(
            "What is the surface area of a rectangle-faced box 2 by 3 by 4?",
            ["24", "52", "26", "48"],
        )
        assert validator.validate(question).valid

    def test_non_numeric_answer_not_checked(self, validator):
        question = make_question(
            "A rectangle is 8 m by 5 m. Which formula gives its area?",
            ["l + w", "l × w", "2l", "4w"],
        )
        assert validator.validate(question).valid

    def test_extract_numbers_ignores_pi_approximation(self):
        assert extract_numbers("radius 2 and pi 3.14 height 1,200") == [2.0, 1200.0]

    def test_extract_numbers_skips_non_dimensions(self):
        assert extract_numbers("question 3: a 2d shape, the 1st side is 5cm and 4x6 m") == [5.0, 4.0, 6.0]
        assert extract_numbers("#2 a box 3 by 4") == [3.0, 4.0]

    def test_shape_descriptor_does_not_shift_dimensions(self, validator):
        question = make_question(
            "What is the area of this 2D rectangle with length 5 cm and width 3 cm?",
            ["8 cm²", "15 cm²", "16 cm²", "30 cm²"],
        )
        assert validator.validate(question).valid

    def test_question_number_does_not_shift_dimensions(self, validator):
        question = make_question(
            "Question 7: A rectangle is 9 m long and 2 m wide. What is its perimeter?",
            ["11 m", "22 m", "18 m", "20 m"],
        )
        assert validator.validate(question).valid


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
