"""
Candidate expression generator for the Make 10 puzzle.

Every problem is four digits in a fixed order. A candidate fills the three
operator slots between them and picks one of twelve parenthesization
shapes, giving 4 ** 3 * 12 = 768 candidates per problem.
"""

import itertools
from typing import Iterator, List, NamedTuple, Sequence, Tuple

OPERATORS = ('+', '-', '*', '/')


class ParenShape(NamedTuple):
    """A fixed parenthesization template over n0..n3 and op1..op3."""
    name: str
    template: str

    def render(self, digits: Sequence[int], ops: Sequence[str]) -> str:
        n0, n1, n2, n3 = digits
        op1, op2, op3 = ops
        return self.template.format(
            n0=n0, n1=n1, n2=n2, n3=n3, op1=op1, op2=op2, op3=op3
        )


SHAPES: Tuple[ParenShape, ...] = (
    # No parentheses
    ParenShape('flat', '{n0}{op1}{n1}{op2}{n2}{op3}{n3}'),
    # Single pair
    ParenShape('left-pair', '({n0}{op1}{n1}){op2}{n2}{op3}{n3}'),
    ParenShape('middle-pair', '{n0}{op1}({n1}{op2}{n2}){op3}{n3}'),
    ParenShape('right-pair', '{n0}{op1}{n1}{op2}({n2}{op3}{n3})'),
    # Two pairs
    ParenShape('left-nested', '(({n0}{op1}{n1}){op2}{n2}){op3}{n3}'),
    ParenShape('left-inner-middle', '({n0}{op1}({n1}{op2}{n2})){op3}{n3}'),
    ParenShape('right-inner-middle', '{n0}{op1}(({n1}{op2}{n2}){op3}{n3})'),
    ParenShape('right-nested', '{n0}{op1}({n1}{op2}({n2}{op3}{n3}))'),
    ParenShape('two-pairs', '({n0}{op1}{n1}){op2}({n2}{op3}{n3})'),
    ParenShape('right-triple', '{n0}{op1}({n1}{op2}{n2}{op3}{n3})'),
    # Three pairs
    ParenShape('left-nested-outer', '((({n0}{op1}{n1}){op2}{n2}){op3}{n3})'),
    ParenShape('right-inner-middle-outer', '({n0}{op1}(({n1}{op2}{n2}){op3}{n3}))'),
)


def to_digits(problem: str) -> Tuple[int, ...]:
    """
    Convert a 4-character problem string into its digits.

    Raises:
        ValueError: If the problem is not exactly four decimal digits
    """
    if len(problem) != 4 or not all(c in '0123456789' for c in problem):
        raise ValueError(f"Problem must be four digits, got {problem!r}")
    return tuple(int(c) for c in problem)


def iter_expressions(digits: Sequence[int]) -> Iterator[str]:
    """
    Yield every candidate expression for four ordered digits.

    Operators vary op1 slowest and op3 fastest; the twelve shapes are
    emitted in table order for each operator combination.
    """
    if len(digits) != 4:
        raise ValueError(f"Expected four digits, got {len(digits)}")
    for ops in itertools.product(OPERATORS, repeat=3):
        for shape in SHAPES:
            yield shape.render(digits, ops)


def generate_expressions(digits: Sequence[int]) -> List[str]:
    """Return all 768 candidate expressions for four ordered digits."""
    return list(iter_expressions(digits))
