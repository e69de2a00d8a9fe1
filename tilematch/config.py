"""Configuration management."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from tilematch.logging import GameLogConfig
from tilematch.models.card import TILE_SIZE
from tilematch.models.level import GridSize, LevelDefinition
from tilematch.models.palette import CardPalette, default_card_sprites


class GameConfig(BaseModel):
    """Game configuration."""

    # Used to synthesize a level when no level list is supplied
    card_num: int = 5
    grid: GridSize = GridSize()
    min_match: int = 3
    trap: bool = False  # Trap rate 0.05 when enabled

    level_index: int = 0
    campaign: bool = False  # Use the built-in campaign
    levels: list[LevelDefinition] = Field(default_factory=list)
    levels_file: str | None = None


class TimingConfig(BaseModel):
    """Timer and presentation pacing configuration."""

    tick_interval: float = 1.0  # Countdown tick (seconds)
    hint_clear_delay: float = 1.8
    paced_cascades: bool = False
    phase_delay: float = 0.3
    settle_delay: float = 0.2
    tile_size: int = TILE_SIZE


class AudioConfig(BaseModel):
    """Audio configuration."""

    sound: bool = True
    volume: float = 1.0

    @field_validator("volume")
    @classmethod
    def _clamp_volume(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)


class AssetsConfig(BaseModel):
    """Card artwork configuration."""

    cards: list[str] = Field(default_factory=default_card_sprites)
    cards2x: list[str] = Field(default_factory=lambda: default_card_sprites("@2x"))

    def palette(self) -> CardPalette:
        """Build the card palette."""
        return CardPalette(sprites=self.cards, sprites2x=self.cards2x)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_board: bool = False


class Config(BaseModel):
    """Root configuration."""

    game: GameConfig = GameConfig()
    timing: TimingConfig = TimingConfig()
    audio: AudioConfig = AudioConfig()
    assets: AssetsConfig = AssetsConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogConfig = GameLogConfig()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
