"""
Arithmetic expression parser for the Make 10 game.
Recursive-descent evaluator over +, -, *, / and parentheses, without eval().
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


TARGET = 10.0
TOLERANCE = 1e-4
DIVISION_EPSILON = 1e-9
DIGITS = '0123456789'


class EvalStatus(Enum):
    """Outcome of evaluating an expression."""
    OK = "ok"
    UNDEFINED = "undefined"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class EvalResult:
    """Result of a single evaluation: a value, an undefined marker, or a parse error."""
    status: EvalStatus
    value: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is EvalStatus.OK

    def matches(self, target: float = TARGET, tolerance: float = TOLERANCE) -> bool:
        """True if the value is defined and within tolerance of the target."""
        return self.ok and abs(self.value - target) < tolerance


class ExpressionSyntaxError(ValueError):
    """Raised inside the parser when the input is not a well-formed expression."""


class _DivisionUndefined(Exception):
    """Unwinds the parser when a divisor is too close to zero."""


class _Parser:
    """
    Cursor over one expression string.

    A new instance is created for every evaluation, so no state is shared
    between calls.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def peek(self) -> Optional[str]:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def parse(self) -> float:
        value = self.expression()
        if self.pos != len(self.text):
            raise ExpressionSyntaxError(
                f"Unexpected '{self.text[self.pos]}' at position {self.pos}"
            )
        return value

    def expression(self) -> float:
        # expression := term (('+' | '-') term)*
        result = self.term()
        while self.peek() in ('+', '-'):
            op = self.text[self.pos]
            self.pos += 1
            right = self.term()
            if op == '+':
                result += right
            else:
                result -= right
        return result

    def term(self) -> float:
        # term := factor (('*' | '/') factor)*
        result = self.factor()
        while self.peek() in ('*', '/'):
            op = self.text[self.pos]
            self.pos += 1
            right = self.factor()
            if op == '*':
                result *= right
            else:
                if abs(right) < DIVISION_EPSILON:
                    raise _DivisionUndefined()
                result /= right
        return result

    def factor(self) -> float:
        # factor := '(' expression ')' | '-' factor | number
        char = self.peek()
        if char == '(':
            self.pos += 1
            result = self.expression()
            if self.peek() != ')':
                raise ExpressionSyntaxError(f"Expected ')' at position {self.pos}")
            self.pos += 1
            return result

        if char == '-':
            self.pos += 1
            return -self.factor()

        return self.number()

    def number(self) -> float:
        start = self.pos
        while self.peek() is not None and self.peek() in DIGITS:
            self.pos += 1
        if start == self.pos:
            if self.peek() is None:
                raise ExpressionSyntaxError("Unexpected end of expression")
            raise ExpressionSyntaxError(
                f"Expected a number at position {self.pos}, got '{self.text[self.pos]}'"
            )
        return float(self.text[start:self.pos])


class ExpressionParser:
    """
    Parses and evaluates arithmetic expressions.
    Only allows: +, -, *, / operators, digits, and parentheses.
    """

    # Display symbols used by players, mapped to the parser's operators
    SYMBOL_ALIASES = {
        '×': '*',
        'x': '*',
        'X': '*',
        '÷': '/',
        '−': '-',
    }

    # Characters allowed in expressions
    ALLOWED_CHARS = set('0123456789+-*/() ')

    def normalize(self, expression: str) -> str:
        """Replace display symbols with parser operators and drop whitespace."""
        for alias, op in self.SYMBOL_ALIASES.items():
            expression = expression.replace(alias, op)
        return ''.join(expression.split())

    def check_characters(self, expression: str) -> Optional[str]:
        """Return an error message if the expression holds a disallowed character."""
        for c in expression:
            if c not in self.ALLOWED_CHARS:
                return f"Character **{c}** is not allowed"
        return None

    def validate_digits(self, expression: str, problem: str) -> Tuple[bool, Optional[str]]:
        """
        Check that an expression uses the problem's digits in their original order.

        Args:
            expression: The normalized mathematical expression
            problem: The 4-character digit string being solved

        Returns:
            Tuple of (is_valid, error_message or None)
        """
        # A '-' where an operand is expected is a sign, not subtraction
        if re.search(r'(^|[(+\-*/])-', expression):
            return False, "Digits cannot carry a sign"

        operands = re.findall(r'\d+', expression)

        for operand in operands:
            if len(operand) > 1:
                return False, f"Digits must be used one at a time, got **{operand}**"

        used = ''.join(operands)
        if used != problem:
            if sorted(used) == sorted(problem):
                return False, f"Digits must stay in order: **{problem}**"
            return False, f"Use exactly the digits **{problem}**"

        if len(re.findall(r'[+\-*/]', expression)) < len(problem) - 1:
            return False, "Put an operator between every pair of digits"

        return True, None

    def evaluate(self, expression: str) -> EvalResult:
        """
        Evaluate an expression with the recursive-descent parser.

        Whitespace is ignored. Never raises: malformed input comes back as
        a PARSE_ERROR result and a near-zero divisor as UNDEFINED.

        Args:
            expression: The mathematical expression to evaluate

        Returns:
            EvalResult describing the outcome
        """
        clean_expr = ''.join(expression.split())

        if not clean_expr:
            return EvalResult(EvalStatus.PARSE_ERROR, error="Empty expression")

        try:
            value = _Parser(clean_expr).parse()
        except _DivisionUndefined:
            return EvalResult(EvalStatus.UNDEFINED, error="Division by zero")
        except ExpressionSyntaxError as e:
            return EvalResult(EvalStatus.PARSE_ERROR, error=str(e))
        except RecursionError:
            return EvalResult(EvalStatus.PARSE_ERROR, error="Expression is nested too deeply")

        return EvalResult(EvalStatus.OK, value=value)

    def evaluates_to_target(self, expression: str) -> bool:
        """True if the expression evaluates to 10 within tolerance."""
        return self.evaluate(expression).matches()

    def parse_answer(self, expression: str, problem: str) -> dict:
        """
        Complete validation and evaluation of a player's answer.

        Args:
            expression: The expression as typed by the player
            problem: The 4-character digit string being solved

        Returns:
            Dictionary with:
            - valid: bool
            - expression: normalized expression
            - result: float or None
            - correct: bool
            - error: str or None
        """
        result = {
            'valid': False,
            'expression': '',
            'result': None,
            'correct': False,
            'error': None,
        }

        clean_expr = self.normalize(expression)
        result['expression'] = clean_expr

        if not clean_expr:
            result['error'] = "Empty expression"
            return result

        error = self.check_characters(clean_expr)
        if error:
            result['error'] = error
            return result

        is_valid, error = self.validate_digits(clean_expr, problem)
        if not is_valid:
            result['error'] = error
            return result

        evaluation = self.evaluate(clean_expr)

        if evaluation.status is EvalStatus.PARSE_ERROR:
            result['error'] = f"Invalid syntax: {evaluation.error}"
            return result

        result['valid'] = True
        if evaluation.ok:
            result['result'] = evaluation.value
            result['correct'] = evaluation.matches()
        else:
            result['error'] = evaluation.error

        return result
