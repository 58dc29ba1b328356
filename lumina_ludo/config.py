import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_seed() -> int | None:
    raw = os.getenv("SEED", "").strip()
    return int(raw) if raw else None


@dataclass(slots=True)
class Config:
    # --- Constants ---
    RING_SIZE: int = 52  # shared ring cells 0..51
    HOME_STRETCH_LENGTH: int = 5  # private cells 52..56
    TOKENS_PER_PLAYER: int = 4
    BASE_POSITION: int = -1
    FINISH_POSITION: int = 100  # absorbing sentinel
    EXIT_ROLL: int = 6
    DICE_MIN: int = 1
    DICE_MAX: int = 6

    NUM_PLAYERS: int = int(os.getenv("NUM_PLAYERS", 4))
    MAX_TURNS: int = int(os.getenv("MAX_TURNS", 1000))
    SEED: int | None = field(default_factory=_env_seed)
    EVENT_LOG_SIZE: int = int(os.getenv("EVENT_LOG_SIZE", 16))

    # Absolute ring offsets, seat order Red, Green, Yellow, Blue
    START_OFFSETS: list[int] = field(default_factory=lambda: [0, 13, 26, 39])
    # Start cells plus star cells
    SAFE_CELLS: list[int] = field(
        default_factory=lambda: [0, 8, 13, 21, 26, 34, 39, 47]
    )

    # Derived (populated in __post_init__ due to slots)
    RING_END: int = 0
    HOME_STRETCH_START: int = 0
    HOME_STRETCH_END: int = 0
    FINISH_STEP: int = 0

    def __post_init__(self):
        # Relative path covers 0..51
        self.RING_END = self.RING_SIZE - 1
        # Home stretch is 52..56 and one more step (57) finishes
        self.HOME_STRETCH_START = self.RING_SIZE
        self.HOME_STRETCH_END = self.RING_SIZE + self.HOME_STRETCH_LENGTH - 1
        self.FINISH_STEP = self.HOME_STRETCH_END + 1

        if self.NUM_PLAYERS < 2 or self.NUM_PLAYERS > 4:
            raise ValueError("NUM_PLAYERS must be between 2 and 4")
        if self.MAX_TURNS < 1:
            raise ValueError("MAX_TURNS must be positive")


@dataclass(slots=True)
class AdvisorConfig:
    """Settings for the remote move advisor and the profile generator."""

    model_name: str = os.getenv("ADVISOR_MODEL", "google_genai:gemini-2.0-flash")
    temperature: float = float(os.getenv("ADVISOR_TEMPERATURE", "0.3"))
    timeout: float = float(os.getenv("ADVISOR_TIMEOUT", "5.0"))
    use_remote: bool = field(default_factory=lambda: _env_flag("USE_REMOTE_ADVISOR", "false"))
    circuit_breaker_threshold: int = int(os.getenv("CIRCUIT_BREAKER_THRESHOLD", 3))
    circuit_breaker_cooldown: float = float(
        os.getenv("CIRCUIT_BREAKER_COOLDOWN", "60")
    )

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError("ADVISOR_TIMEOUT must be positive")


config = Config()
advisor_config = AdvisorConfig()
