# Games package for the Make 10 bot
from .expression_parser import EvalResult, EvalStatus, ExpressionParser
from .solver import Make10Solver

__all__ = ['EvalResult', 'EvalStatus', 'ExpressionParser', 'Make10Solver']
