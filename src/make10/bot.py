import asyncio
import logging
from collections import deque
from typing import Optional

import discord
from discord.ext import commands

from make10.config.config import Config
from make10.db.redis_client import RedisClient
from make10.games.make10 import GameState, HistoryEntry, Make10Game, format_elapsed
from make10.utils.helpers import send_chunked_message
from make10.verify import format_problems_array

logger = logging.getLogger(__name__)


class Make10Bot(commands.Bot):
    def __init__(self, config: Config):
        intents = discord.Intents.default()
        intents.message_content = True  # Needed to read command arguments
        intents.guilds = True
        intents.guild_messages = True

        super().__init__(command_prefix="!", intents=intents)
        logger.info("Initializing Make10Bot...")
        self.config = config
        self.redis_client = RedisClient(config.redis_host, config.redis_port)
        self.owner_id = int(config.owner_id)
        self.game = Make10Game(self.redis_client, config.game)

        # Message deduplication buffer
        self.processed_messages = deque(maxlen=100)

        # Command handlers dictionary
        self.command_handlers = {
            'make10': self._handle_start,
            'm10': self._handle_answer,
            'm10pass': self._handle_pass,
            'm10status': self._handle_status,
            'm10reset': self._handle_reset,
            'm10top': self._handle_leaderboard,
            'm10problems': self._handle_problems,
            'shutdown': self._handle_shutdown,
        }

    async def setup_hook(self):
        """Register commands and load the problem pool before connecting"""
        self.add_commands()
        # The first run has to sweep all 10000 sequences
        problems = await asyncio.to_thread(self.game.ensure_problems)
        logger.info("Problem pool ready: %d solvable problems", len(problems))

    async def on_ready(self):
        logger.info("Logged in as %s (ID: %s)", self.user, self.user.id)
        await self.change_presence(
            activity=discord.Activity(
                type=discord.ActivityType.playing,
                name="Make 10 | !make10"
            )
        )

    def add_commands(self):
        """Register commands using the command handlers dictionary"""
        for cmd_name, handler in self.command_handlers.items():
            # Create a closure that properly captures the handler
            def make_callback(h):
                async def callback(ctx, *, arg=None):
                    try:
                        if arg is None:
                            await h(ctx)
                        else:
                            await h(ctx, arg)
                    except ValueError as e:
                        await ctx.send(str(e))
                return callback

            cmd = commands.Command(make_callback(handler), name=cmd_name)
            self.add_command(cmd)

        logger.debug("Registered %d commands", len(self.commands))

    async def on_command_error(self, ctx, error):
        if isinstance(error, commands.CommandNotFound):
            return
        logger.exception("Command %s failed", ctx.command, exc_info=error)
        await ctx.send(f"Something went wrong: {error}")

    @staticmethod
    def _ids(ctx):
        server_id = str(ctx.guild.id) if ctx.guild else "dm"
        return server_id, str(ctx.channel.id), str(ctx.author.id)

    def _problem_message(self, game: GameState) -> str:
        digits = "  ".join(game.problem)
        return (
            f"**Problem {game.current_problem + 1} / {game.mode}**\n"
            f"# {digits}\n"
            f"Reach **10** with `+ - × ÷` and parentheses. Keep the digits in order.\n"
            f"Answer with `!m10 <expression>`, give up with `!m10pass`."
        )

    async def _send_end(self, ctx, game: GameState):
        message = (
            f"🏁 {ctx.author.mention} finished!\n"
            f"```\n{self.game.summary(game)}\n```"
        )
        history = self.game.history_lines(game, limit=len(game.history))
        if history:
            message += "\n**History**\n" + "\n".join(history)
        await send_chunked_message(ctx.channel, message)

    async def _handle_start(self, ctx, mode_arg: Optional[str] = None):
        """Handle the make10 command - starts a game for the caller
        Usage: !make10 [number of problems]
        """
        mode = None
        if mode_arg:
            try:
                mode = int(mode_arg.strip())
            except ValueError:
                await ctx.send("Usage: `!make10 [number of problems]`")
                return

        server_id, channel_id, player_id = self._ids(ctx)
        game = self.game.create_game(server_id, channel_id, player_id, mode)
        logger.info("Player %s started a %d-problem game in %s", player_id, game.mode, channel_id)
        await ctx.send(self._problem_message(game))

    async def _handle_answer(self, ctx, expression: Optional[str] = None):
        """Handle the m10 command - submits an answer for the current problem"""
        if expression is None:
            await ctx.send("Please provide an expression, e.g. `!m10 (1+2)*3+1`.")
            return

        server_id, channel_id, player_id = self._ids(ctx)
        entry, game = self.game.submit_answer(server_id, channel_id, player_id, expression)

        if not entry.correct:
            await ctx.send(self._format_wrong(entry))
            return

        if game.is_finished():
            await ctx.send(f"✅ `{entry.expression}` = 10")
            await self._send_end(ctx, game)
            return

        await ctx.send(f"✅ `{entry.expression}` = 10\n\n" + self._problem_message(game))

    @staticmethod
    def _format_wrong(entry: HistoryEntry) -> str:
        if entry.result is None:
            return f"❌ `{entry.expression}` is undefined ({entry.error}). Try again!"
        return f"❌ `{entry.expression}` = {entry.result:.2f}. Try again!"

    async def _handle_pass(self, ctx, arg: Optional[str] = None):
        """Handle the m10pass command - reveals a solution and moves on"""
        server_id, channel_id, player_id = self._ids(ctx)
        entry, game = self.game.pass_problem(server_id, channel_id, player_id)

        reveal = f"⏭ One answer for **{entry.problem}**: `{entry.expression}`"
        if game.is_finished():
            await ctx.send(reveal)
            await self._send_end(ctx, game)
            return

        await ctx.send(reveal + "\n\n" + self._problem_message(game))

    async def _handle_status(self, ctx, arg: Optional[str] = None):
        """Handle the m10status command - shows progress of the caller's game"""
        server_id, channel_id, player_id = self._ids(ctx)
        game = self.game.get_active_game(server_id, channel_id, player_id)
        if not game:
            await ctx.send("You have no active game here. Start one with `!make10`.")
            return

        stats = self.game.stats(game)
        status_message = (
            f"**Time:** {format_elapsed(game.elapsed())}\n"
            f"**Correct:** {stats['correct']} / {game.mode} "
            f"(answers: {stats['answered']}, passed: {stats['passed']})\n\n"
            + self._problem_message(game)
        )
        history = self.game.history_lines(game)
        if history:
            status_message += "\n\n**Recent answers**\n" + "\n".join(history)

        await send_chunked_message(ctx.channel, status_message)

    async def _handle_reset(self, ctx, arg: Optional[str] = None):
        """Handle the m10reset command - cancels the caller's game"""
        server_id, channel_id, player_id = self._ids(ctx)
        if self.game.cancel_game(server_id, channel_id, player_id):
            await ctx.send("Your game has been reset.")
        else:
            await ctx.send("You have no active game here.")

    async def _handle_leaderboard(self, ctx, arg: Optional[str] = None):
        """Handle the m10top command - shows the server leaderboard"""
        server_id, _, _ = self._ids(ctx)
        leaderboard = self.game.get_leaderboard(server_id)
        if not leaderboard:
            await ctx.send("No scores yet. Be the first with `!make10`!")
            return

        lines = [f"{rank}. <@{user_id}> - **{score}**"
                 for rank, (user_id, score) in enumerate(leaderboard, start=1)]
        await ctx.send("**Make 10 leaderboard**\n" + "\n".join(lines))

    async def _handle_problems(self, ctx, arg: Optional[str] = None):
        """Handle the m10problems command - posts the solvable set as a JavaScript literal"""
        problems = self.game.ensure_problems()
        header = f"{len(problems)} solvable problems:"
        await ctx.send(header)
        await send_chunked_message(ctx.channel, format_problems_array(problems), code_language="js")

    async def _handle_shutdown(self, ctx, arg: Optional[str] = None):
        """Handle the shutdown command"""
        if ctx.author.id != self.owner_id:
            await ctx.send("Only the bot owner can use this command.")
            return

        await ctx.send("Shutting down...")
        await self.close()

    async def on_message(self, message: discord.Message):
        """Called when a message is received"""
        # Ignore messages from the bot itself
        if message.author == self.user:
            return

        # Deduplication check - must be BEFORE process_commands to prevent double command execution
        if message.id in self.processed_messages:
            return
        self.processed_messages.append(message.id)

        await self.process_commands(message)
