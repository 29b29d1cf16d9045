"""
Shared type definitions for Mantra Counter.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Literal


# Canonical chant vocabulary. Empty string is padding / no match.
Token = str

HARE: Token = "Hare"
KRSNA: Token = "Krsna"
RAMA: Token = "Rama"
EMPTY: Token = ""

# One full Maha-mantra cycle
REFERENCE_PATTERN: Tuple[Token, ...] = (
    HARE, KRSNA, HARE, KRSNA, KRSNA, KRSNA, HARE, HARE,
    HARE, RAMA, HARE, RAMA, RAMA, RAMA, HARE, HARE,
)

NAMES_PER_MANTRA = 16
MANTRAS_PER_ROUND = 108
NAMES_PER_ROUND = NAMES_PER_MANTRA * MANTRAS_PER_ROUND  # 1728

Locale = Literal["en", "hi"]
DisplayMode = Literal["mantras", "detailed"]


@dataclass(frozen=True)
class TranscriptDelta:
    """One event from the transcription feed (full running transcript)."""
    text: str
    is_final: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class CounterState:
    """Snapshot of the chant counters."""
    total_matches: int = 0

    @property
    def mantra_count(self) -> int:
        return self.total_matches // NAMES_PER_MANTRA

    @property
    def round_count(self) -> int:
        return self.total_matches // NAMES_PER_ROUND


@dataclass
class DisplayUpdate:
    """Everything the engine publishes to a display sink."""
    display_text: str
    result_text: str = ""
    missing_first: List[int] = field(default_factory=list)
    missing_second: List[int] = field(default_factory=list)
    control_title: str = "Start Recording"
    control_enabled: bool = True
    counter: CounterState = field(default_factory=CounterState)


@dataclass(frozen=True)
class ConfigSnapshot:
    """
    Immutable snapshot of configuration for an engine run.
    Ensures config changes mid-session don't cause inconsistency.
    """
    locale: Locale = "en"
    restart_interval: float = 15.0
    restart_grace: float = 0.5
    highlight_seconds: float = 2.0
    display_mode: DisplayMode = "mantras"
    show_devanagari: bool = True
    trigger_key: str = "alt_r"
    reset_confirm_seconds: float = 3.0
