import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).with_name('game.yaml')


@dataclass
class GameSettings:
    modes: List[int] = field(default_factory=lambda: [5, 10, 20])
    default_mode: int = 5
    game_ttl: int = 3600
    leaderboard_size: int = 10


def load_game_settings(path) -> GameSettings:
    """Load game settings from a YAML file, falling back to defaults for missing keys."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f.read())
    except yaml.YAMLError as e:
        logger.error("YAML parsing error in %s: %s", path, e)
        raise
    except OSError as e:
        raise ValueError(f"Failed to load game settings: {str(e)}")

    if not data:
        logger.warning("Empty settings file %s, using defaults", path)
        return GameSettings()

    settings = GameSettings(
        modes=[int(m) for m in data.get('modes', [5, 10, 20])],
        default_mode=int(data.get('default_mode', 5)),
        game_ttl=int(data.get('game_ttl', 3600)),
        leaderboard_size=int(data.get('leaderboard_size', 10)),
    )

    if settings.default_mode not in settings.modes:
        raise ValueError(f"default_mode {settings.default_mode} is not one of {settings.modes}")
    if any(m < 1 for m in settings.modes):
        raise ValueError("Every mode must ask for at least one problem")

    return settings


class Config:
    def __init__(self):
        self.discord_token = os.getenv('DISCORD_TOKEN')
        self.redis_host = os.getenv('REDIS_HOST', 'localhost')
        self.redis_port = int(os.getenv('REDIS_PORT', 6379))
        self.owner_id = os.getenv('OWNER_ID')
        self.settings_path = os.getenv('MAKE10_SETTINGS', str(DEFAULT_SETTINGS_PATH))
        self.game = load_game_settings(self.settings_path)

        # Validate required environment variables
        if not all([self.discord_token, self.owner_id]):
            raise ValueError("Missing required environment variables")
