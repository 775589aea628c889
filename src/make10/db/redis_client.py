from typing import Iterable, List

import redis


class RedisClient:
    PROBLEMS_KEY = "make10:problems"

    def __init__(self, host: str, port: int):
        self.redis = redis.Redis(host=host, port=port, decode_responses=True)

    def get_problems(self) -> List[str]:
        """Cached solvable problems, sorted; empty if the sweep has not been stored yet"""
        problems = self.redis.smembers(self.PROBLEMS_KEY)
        return sorted(problems) if problems else []

    def set_problems(self, problems: Iterable[str]):
        """Replace the cached problem set"""
        problems = list(problems)
        self.redis.delete(self.PROBLEMS_KEY)
        if problems:
            self.redis.sadd(self.PROBLEMS_KEY, *problems)
