import pytest

from make10.db.redis_client import RedisClient


class _FakeRedis:
    """In-memory stand-in for the handful of redis.Redis calls the game makes."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def expire(self, key, seconds):
        self.ttls[key] = seconds

    def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)
            self.ttls.pop(key, None)

    def smembers(self, key):
        return set(self.data.get(key, set()))

    def sadd(self, key, *members):
        self.data.setdefault(key, set()).update(members)

    def zincrby(self, key, amount, member):
        scores = self.data.setdefault(key, {})
        scores[member] = scores.get(member, 0) + amount
        return scores[member]

    def zrevrange(self, key, start, end, withscores=False):
        scores = self.data.get(key, {})
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        ranked = ranked[start:end + 1]
        if withscores:
            return [(member, float(score)) for member, score in ranked]
        return [member for member, _ in ranked]


@pytest.fixture
def fake_redis():
    return _FakeRedis()


@pytest.fixture
def redis_client(fake_redis):
    client = RedisClient("localhost", 6379)
    client.redis = fake_redis
    return client
