import pytest

from make10.games.expression_parser import EvalStatus, ExpressionParser


@pytest.fixture
def parser():
    return ExpressionParser()


def test_evaluate_respects_precedence(parser):
    result = parser.evaluate("2+2*2+2")

    assert result.status is EvalStatus.OK
    assert result.value == 8.0
    assert not parser.evaluates_to_target("2+2*2+2")


def test_evaluate_parentheses_override_precedence(parser):
    result = parser.evaluate("(2+2)*2+2")

    assert result.value == 10.0
    assert parser.evaluates_to_target("(2+2)*2+2")


def test_subtraction_and_division_are_left_associative(parser):
    assert parser.evaluate("9-3-2").value == 4.0
    assert parser.evaluate("8/4/2").value == 1.0


def test_division_by_zero_is_undefined(parser):
    result = parser.evaluate("5/0")

    assert result.status is EvalStatus.UNDEFINED
    assert result.value is None
    assert not result.matches()
    assert not parser.evaluates_to_target("5/0")


def test_undefined_spreads_to_whole_expression(parser):
    assert parser.evaluate("1/0+9").status is EvalStatus.UNDEFINED
    assert parser.evaluate("4/(1-1)*0").status is EvalStatus.UNDEFINED


def test_fractional_results_within_tolerance(parser):
    assert parser.evaluates_to_target("(1/3)*30")
    assert parser.evaluate("1/3").value == pytest.approx(1 / 3)


def test_unary_minus(parser):
    assert parser.evaluate("-(1-3)*5").value == 10.0
    assert parser.evaluate("--2").value == 2.0


def test_whitespace_is_ignored(parser):
    assert parser.evaluate(" ( 2 + 2 ) * 2 + 2 ").value == 10.0


def test_multi_digit_numbers(parser):
    assert parser.evaluate("12-2").value == 10.0


@pytest.mark.parametrize("expression", ["", "(1+2", "1+", "1+2)", "a", "1++", "()", "2*(3"])
def test_malformed_input_is_a_parse_error(parser, expression):
    result = parser.evaluate(expression)

    assert result.status is EvalStatus.PARSE_ERROR
    assert result.error
    assert not parser.evaluates_to_target(expression)


def test_normalize_maps_display_symbols(parser):
    assert parser.normalize("1 × 2 × 3 + 4") == "1*2*3+4"
    assert parser.normalize("(8 ÷ 4) − 2") == "(8/4)-2"


def test_parse_answer_accepts_correct_expression(parser):
    result = parser.parse_answer("1×2×3+4", "1234")

    assert result['valid']
    assert result['correct']
    assert result['result'] == 10.0
    assert result['expression'] == "1*2*3+4"


def test_parse_answer_records_wrong_expression(parser):
    result = parser.parse_answer("1+2*3+4", "1234")

    assert result['valid']
    assert not result['correct']
    assert result['result'] == 11.0


def test_parse_answer_keeps_undefined_answers_valid(parser):
    result = parser.parse_answer("9/(9-9)+9", "9999")

    assert result['valid']
    assert not result['correct']
    assert result['result'] is None
    assert result['error'] == "Division by zero"


def test_parse_answer_rejects_reordered_digits(parser):
    result = parser.parse_answer("4+3*2*1", "1234")

    assert not result['valid']
    assert "in order" in result['error']


def test_parse_answer_rejects_joined_digits(parser):
    result = parser.parse_answer("12-3+4", "1234")

    assert not result['valid']
    assert "one at a time" in result['error']


def test_parse_answer_rejects_missing_digits(parser):
    result = parser.parse_answer("1+2+7", "1234")

    assert not result['valid']
    assert "exactly the digits" in result['error']


def test_parse_answer_rejects_missing_operators(parser):
    result = parser.parse_answer("1(2)(3)(4)", "1234")

    assert not result['valid']
    assert "operator" in result['error']


def test_parse_answer_rejects_foreign_characters(parser):
    result = parser.parse_answer("1+2+3+4^1", "1234")

    assert not result['valid']
    assert "not allowed" in result['error']


@pytest.mark.parametrize("expression", ["-1*2+3*4", "1*(-2)+3*4", "1--2+3+4", "1*-2+3*4", "-(1-2)*3+4"])
def test_parse_answer_rejects_signed_operands(parser, expression):
    result = parser.parse_answer(expression, "1234")

    assert not result['valid']
    assert not result['correct']
    assert result['error'] == "Digits cannot carry a sign"


def test_parse_answer_allows_subtraction(parser):
    result = parser.parse_answer("(5+5)*(3-2)", "5532")

    assert result['valid']
    assert result['correct']


def test_parse_answer_reports_syntax_errors(parser):
    result = parser.parse_answer("(1+2*3+4", "1234")

    assert not result['valid']
    assert result['error'].startswith("Invalid syntax")


def test_deep_nesting_is_a_parse_error_not_a_crash(parser):
    result = parser.evaluate("(" * 5000 + "1" + ")" * 5000)

    assert result.status is EvalStatus.PARSE_ERROR


def test_non_ascii_digits_are_rejected(parser):
    assert parser.evaluate("2+²").status is EvalStatus.PARSE_ERROR
