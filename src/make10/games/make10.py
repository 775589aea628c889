"""
Make 10 Game - Core game logic and state management.

Each player gets a run of four-digit problems and must reach 10 by putting
operators and parentheses between the digits, without reordering them.
"""

import json
import random
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from make10.config.config import GameSettings
from make10.verify import verify_all

from .expression_parser import ExpressionParser
from .solver import Make10Solver


class GameStatus(Enum):
    """Status of a game instance."""
    ACTIVE = "active"
    ENDED = "ended"
    CANCELLED = "cancelled"


@dataclass
class HistoryEntry:
    """One answered (or passed) problem."""
    problem: str
    expression: str
    result: Optional[float]
    correct: bool
    error: Optional[str] = None
    passed: bool = False


@dataclass
class GameState:
    """Represents the state of an active Make 10 game."""
    mode: int
    problems: List[str]
    server_id: str
    channel_id: str
    player_id: str
    start_time: float
    status: str
    current_problem: int = 0
    correct_count: int = 0
    end_time: Optional[float] = None
    history: List[HistoryEntry] = field(default_factory=list)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: str) -> 'GameState':
        """Deserialize from JSON string."""
        parsed = json.loads(data)
        parsed['history'] = [HistoryEntry(**h) for h in parsed.get('history', [])]
        return cls(**parsed)

    @property
    def problem(self) -> Optional[str]:
        """The problem currently being solved, None once all are done."""
        if self.current_problem < len(self.problems):
            return self.problems[self.current_problem]
        return None

    def is_finished(self) -> bool:
        return self.current_problem >= len(self.problems)

    def elapsed(self) -> float:
        """Seconds since the game started, frozen once it ends."""
        end = self.end_time if self.end_time is not None else time.time()
        return max(0.0, end - self.start_time)


def format_elapsed(seconds: float) -> str:
    """Format seconds as MM:SS, like the game timer."""
    seconds = int(seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class Make10Game:
    """
    Main game manager for Make 10.

    Handles game creation, answer submission, and results.
    Uses Redis for persistent state storage.
    """

    def __init__(self, redis_client, settings: Optional[GameSettings] = None,
                 solver: Optional[Make10Solver] = None):
        """
        Initialize the game manager.

        Args:
            redis_client: RedisClient instance for state persistence
            settings: Game settings; defaults if omitted
            solver: Solver used to build the problem pool and reveal answers
        """
        self.redis = redis_client
        self.settings = settings or GameSettings()
        self.parser = ExpressionParser()
        self.solver = solver or Make10Solver()
        self._problems: List[str] = []

    def _game_key(self, server_id: str, channel_id: str, player_id: str) -> str:
        """Generate Redis key for a player's game state."""
        return f"make10:game:{server_id}:{channel_id}:{player_id}"

    def _leaderboard_key(self, server_id: str) -> str:
        """Generate Redis key for server leaderboard."""
        return f"make10:leaderboard:{server_id}"

    # ==================== PROBLEM POOL ====================

    def ensure_problems(self) -> List[str]:
        """
        Load the solvable problem pool, running the full sweep if it is not cached.

        The sweep takes a while, so callers on an event loop should run this
        in a worker thread.
        """
        if self._problems:
            return self._problems

        problems = self.redis.get_problems()
        if not problems:
            problems = verify_all(solver=self.solver)
            self.redis.set_problems(problems)

        self._problems = problems
        return problems

    def draw_problems(self, count: int) -> List[str]:
        """Pick `count` distinct problems at random from the pool."""
        pool = self.ensure_problems()
        if count > len(pool):
            raise ValueError(f"Only {len(pool)} problems are available")
        return random.sample(pool, count)

    # ==================== GAME METHODS ====================

    def _save_game(self, state: GameState) -> None:
        """Save game state to Redis."""
        key = self._game_key(state.server_id, state.channel_id, state.player_id)
        self.redis.redis.set(key, state.to_json())
        self.redis.redis.expire(key, self.settings.game_ttl)

    def _delete_game(self, state: GameState) -> None:
        """Delete game state from Redis."""
        self.redis.redis.delete(self._game_key(state.server_id, state.channel_id, state.player_id))

    def get_active_game(self, server_id: str, channel_id: str, player_id: str) -> Optional[GameState]:
        """
        Get the player's active game in a channel, if any.

        Returns:
            GameState if active game exists, None otherwise
        """
        data = self.redis.redis.get(self._game_key(server_id, channel_id, player_id))
        if data:
            game = GameState.from_json(data)
            if game.status == GameStatus.ACTIVE.value:
                return game
        return None

    def _require_game(self, server_id: str, channel_id: str, player_id: str) -> GameState:
        game = self.get_active_game(server_id, channel_id, player_id)
        if not game:
            raise ValueError("You have no active game here! Start one with `!make10`")
        return game

    def create_game(self, server_id: str, channel_id: str, player_id: str,
                    mode: Optional[int] = None) -> GameState:
        """
        Create a new game for a player in a channel.

        Args:
            server_id: Discord server/guild ID
            channel_id: Discord channel ID
            player_id: User ID of the player
            mode: Number of problems to play

        Returns:
            The newly created GameState

        Raises:
            ValueError: If the mode is not allowed or a game is already active
        """
        mode = self.settings.default_mode if mode is None else mode
        if mode not in self.settings.modes:
            allowed = ", ".join(str(m) for m in self.settings.modes)
            raise ValueError(f"Mode must be one of: {allowed}")

        if self.get_active_game(server_id, channel_id, player_id):
            raise ValueError("You already have a game running here! Finish it or use `!m10reset`.")

        state = GameState(
            mode=mode,
            problems=self.draw_problems(mode),
            server_id=server_id,
            channel_id=channel_id,
            player_id=player_id,
            start_time=time.time(),
            status=GameStatus.ACTIVE.value,
        )

        self._save_game(state)
        return state

    def submit_answer(self, server_id: str, channel_id: str, player_id: str,
                      expression: str) -> Tuple[HistoryEntry, GameState]:
        """
        Process a player's answer for the current problem.

        A correct answer moves to the next problem. A wrong one is recorded
        in the history and the problem stays. Malformed answers are rejected
        without being recorded.

        Returns:
            Tuple of (the recorded HistoryEntry, updated GameState)

        Raises:
            ValueError: If no game is active or the answer is malformed
        """
        game = self._require_game(server_id, channel_id, player_id)
        problem = game.problem

        result = self.parser.parse_answer(expression, problem)
        if not result['valid']:
            raise ValueError(result['error'])

        entry = HistoryEntry(
            problem=problem,
            expression=result['expression'],
            result=result['result'],
            correct=result['correct'],
            error=result['error'],
        )
        game.history.append(entry)

        if entry.correct:
            game.correct_count += 1
            game.current_problem += 1

        self._store_or_finish(game)
        return entry, game

    def pass_problem(self, server_id: str, channel_id: str,
                     player_id: str) -> Tuple[HistoryEntry, GameState]:
        """
        Give up on the current problem and reveal a solution.

        Returns:
            Tuple of (HistoryEntry holding the revealed solution, updated GameState)
        """
        game = self._require_game(server_id, channel_id, player_id)
        problem = game.problem
        solution = self.solver.find_solution(problem)

        entry = HistoryEntry(
            problem=problem,
            expression=solution or "",
            result=10.0 if solution else None,
            correct=False,
            passed=True,
        )
        game.history.append(entry)
        game.current_problem += 1

        self._store_or_finish(game)
        return entry, game

    def _store_or_finish(self, game: GameState) -> None:
        if game.is_finished():
            self._finish(game)
        else:
            self._save_game(game)

    def _finish(self, game: GameState) -> None:
        """End a completed game and credit the leaderboard."""
        game.status = GameStatus.ENDED.value
        game.end_time = time.time()
        self._delete_game(game)
        if game.correct_count > 0:
            self.redis.redis.zincrby(self._leaderboard_key(game.server_id),
                                     game.correct_count, game.player_id)

    def cancel_game(self, server_id: str, channel_id: str, player_id: str) -> bool:
        """
        Cancel an active game.

        Returns:
            True if game was cancelled, False if no game existed
        """
        game = self.get_active_game(server_id, channel_id, player_id)
        if not game:
            return False

        self._delete_game(game)
        return True

    def summary(self, game: GameState) -> str:
        """Shareable end-of-game summary."""
        elapsed = int(game.elapsed())
        return (
            "Make 10\n\n"
            f"Time: {elapsed // 60}m {elapsed % 60}s\n"
            f"Correct: {game.correct_count} / {game.mode}"
        )

    def get_leaderboard(self, server_id: str, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """
        Get top players for the server.

        Returns:
            List of (user_id, score) tuples
        """
        limit = limit or self.settings.leaderboard_size
        data = self.redis.redis.zrevrange(self._leaderboard_key(server_id), 0, limit - 1, withscores=True)

        leaderboard = []
        for member, score in data:
            if isinstance(member, bytes):
                member = member.decode('utf-8')
            leaderboard.append((member, int(score)))

        return leaderboard

    def history_lines(self, game: GameState, limit: int = 10) -> List[str]:
        """Recent history rendered one entry per line."""
        lines = []
        for item in game.history[-limit:]:
            if item.passed:
                mark = "⏭"
            else:
                mark = "✅" if item.correct else "❌"
            value = f"{item.result:.2f}" if item.result is not None else (item.error or "undefined")
            lines.append(f"{mark} **{item.problem}**  `{item.expression}` = {value}")
        return lines

    def stats(self, game: GameState) -> Dict[str, int]:
        return {
            'answered': len([h for h in game.history if not h.passed]),
            'correct': game.correct_count,
            'passed': len([h for h in game.history if h.passed]),
        }
