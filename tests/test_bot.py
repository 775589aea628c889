import asyncio
from types import SimpleNamespace

import pytest

from make10.bot import Make10Bot
from make10.config.config import GameSettings
from make10.games.make10 import Make10Game


class _StubChannel:
    def __init__(self, channel_id):
        self.id = channel_id
        self.sent = []

    async def send(self, content, reference=None):
        self.sent.append(content)


class _StubContext:
    def __init__(self):
        self.guild = SimpleNamespace(id=1)
        self.channel = _StubChannel(2)
        self.author = SimpleNamespace(id=3, mention="<@3>")

    async def send(self, content):
        await self.channel.send(content)


@pytest.fixture
def bot(redis_client):
    redis_client.set_problems(["0019", "2222", "3333"])
    # Skip commands.Bot.__init__; handlers only need the game and the owner
    bot = Make10Bot.__new__(Make10Bot)
    bot.game = Make10Game(redis_client, GameSettings(modes=[1, 3], default_mode=1))
    bot.owner_id = 99
    return bot


@pytest.mark.parametrize("handler, reply", [
    ("_handle_status", "You have no active game here. Start one with `!make10`."),
    ("_handle_reset", "You have no active game here."),
    ("_handle_leaderboard", "No scores yet. Be the first with `!make10`!"),
    ("_handle_shutdown", "Only the bot owner can use this command."),
    ("_handle_problems", "3 solvable problems:"),
])
def test_argumentless_commands_ignore_extra_text(bot, handler, reply):
    ctx = _StubContext()

    asyncio.run(getattr(bot, handler)(ctx, "extra words"))

    assert ctx.channel.sent[0] == reply


def test_pass_ignores_extra_text(bot):
    ctx = _StubContext()
    bot.game.create_game("1", "2", "3", mode=1)

    asyncio.run(bot._handle_pass(ctx, "extra"))

    assert ctx.channel.sent[0].startswith("⏭ One answer for")
    assert bot.game.get_active_game("1", "2", "3") is None


def test_reset_after_start(bot):
    ctx = _StubContext()

    asyncio.run(bot._handle_start(ctx, "1"))
    asyncio.run(bot._handle_reset(ctx))

    assert ctx.channel.sent[-1] == "Your game has been reset."
