"""
Exhaustive verification of Make 10 problems.

Checks every digit sequence from 0000 to 9999 in its original order and
prints the solvable ones as a JavaScript array literal.
"""

import logging
import sys
import time
from typing import Callable, Iterable, List, Optional

from make10.games.solver import Make10Solver

logger = logging.getLogger(__name__)

TOTAL_PATTERNS = 10000
PROGRESS_EVERY = 100
ENTRIES_PER_LINE = 10

ProgressCallback = Callable[[int, int], None]


def format_progress(index: int, solvable_count: int) -> str:
    """Render the progress line for the zero-based sweep index."""
    percent = (index * 100) // (TOTAL_PATTERNS - 1)
    return f"Progress: {index + 1} / {TOTAL_PATTERNS} ({percent}%) | Solvable: {solvable_count}"


def verify_all(progress: Optional[ProgressCallback] = None,
               solver: Optional[Make10Solver] = None) -> List[str]:
    """
    Check every 4-digit sequence and collect the solvable ones.

    Args:
        progress: Called as progress(index, solvable_count) every
            PROGRESS_EVERY sequences and on the last one.
        solver: Solver instance to use; a new one by default.

    Returns:
        Sorted list of unique solvable 4-character strings.
    """
    solver = solver or Make10Solver()
    solvable = set()

    for i in range(TOTAL_PATTERNS):
        problem = f"{i:04d}"
        if solver.is_solvable(problem):
            solvable.add(problem)

        if progress and (i % PROGRESS_EVERY == 0 or i == TOTAL_PATTERNS - 1):
            progress(i, len(solvable))

    return sorted(solvable)


def format_problems_array(problems: Iterable[str]) -> str:
    """
    Render problems as a JavaScript `PROBLEMS` constant.

    Entries are double-quoted, sorted, deduplicated and wrapped at
    ENTRIES_PER_LINE per line.
    """
    entries = sorted(set(problems))
    lines = ["const PROBLEMS = ["]

    for start in range(0, len(entries), ENTRIES_PER_LINE):
        chunk = entries[start:start + ENTRIES_PER_LINE]
        line = "    " + ", ".join(f'"{p}"' for p in chunk)
        if start + ENTRIES_PER_LINE < len(entries):
            line += ","
        lines.append(line)

    lines.append("];")
    return "\n".join(lines)


def _print_progress(index: int, solvable_count: int) -> None:
    print(f"\r{format_progress(index, solvable_count)}", end="", flush=True)


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    print("Starting complete verification (0000-9999 WITHOUT reordering, WITHOUT signs)...", flush=True)

    started = time.perf_counter()
    problems = verify_all(progress=_print_progress)
    elapsed = time.perf_counter() - started

    print()
    print()
    print("Verification complete!")
    print(f"Total patterns checked: {TOTAL_PATTERNS}")
    print(f"Solvable patterns found: {len(problems)}")
    print()
    print("// JavaScript array format:")
    print(format_problems_array(problems), flush=True)
    logger.info("Sweep finished in %.1fs", elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
