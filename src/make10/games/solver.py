from typing import Optional

from .expression_parser import ExpressionParser
from .generator import iter_expressions, to_digits


class Make10Solver:
    """
    Solver for the Make 10 puzzle.
    Searches the candidate expressions of a problem for one that equals 10.
    """

    def __init__(self):
        self.parser = ExpressionParser()

    def find_solution(self, problem: str) -> Optional[str]:
        """
        Find the first candidate expression that evaluates to 10.

        Args:
            problem: A 4-character digit string, e.g. "1234".

        Returns:
            The matching expression, or None if the problem is unsolvable.

        Raises:
            ValueError: If the problem is not four digits.
        """
        digits = to_digits(problem)

        # Candidates come in generator order, so the first hit is stable
        for expression in iter_expressions(digits):
            if self.parser.evaluates_to_target(expression):
                return expression

        return None

    def is_solvable(self, problem: str) -> bool:
        """Check whether any candidate expression for the problem reaches 10."""
        return self.find_solution(problem) is not None
