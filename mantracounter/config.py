"""
Settings for the counter.

Precedence, lowest first: ConfigSnapshot defaults, ~/.mantracounter/settings.json,
then MANTRA_LOCALE / MANTRA_DISPLAY_MODE. MANTRA_DATA_DIR moves the whole
data directory (settings, saved count, metrics).
"""

import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Optional

from .types import ConfigSnapshot


LOCALES = ("en", "hi")
DISPLAY_MODES = ("mantras", "detailed")

CHOICES = {"locale": LOCALES, "display_mode": DISPLAY_MODES}
ENV_OVERRIDES = {"MANTRA_LOCALE": "locale", "MANTRA_DISPLAY_MODE": "display_mode"}

SETTING_NAMES = tuple(f.name for f in dataclasses.fields(ConfigSnapshot))


class Config:
    """
    Mutable settings holder; the engine only ever sees snapshot().

    Usage:
        config = Config.load()
        engine = ChantEngine(config.snapshot(), ...)
    """

    def __init__(self, data_dir: Optional[Path] = None):
        defaults = ConfigSnapshot()
        for name in SETTING_NAMES:
            setattr(self, name, getattr(defaults, name))

        self.data_dir: Path = data_dir or Path.home() / ".mantracounter"

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @property
    def state_file(self) -> Path:
        return self.data_dir / "state.json"

    @property
    def metrics_file(self) -> Path:
        return self.data_dir / "metrics.jsonl"

    @classmethod
    def load(cls, data_dir: Optional[Path] = None) -> "Config":
        if data_dir is None and os.getenv("MANTRA_DATA_DIR"):
            data_dir = Path(os.environ["MANTRA_DATA_DIR"]).expanduser()

        config = cls(data_dir)
        config.data_dir.mkdir(parents=True, exist_ok=True)
        if config.settings_file.exists():
            config._read_settings()
        for var, name in ENV_OVERRIDES.items():
            if os.getenv(var):
                config._assign(name, os.environ[var])
        return config

    def _read_settings(self) -> None:
        try:
            data = json.loads(self.settings_file.read_text())
            for name in SETTING_NAMES:
                if name in data:
                    self._assign(name, data[name])
        except Exception as e:
            # Whatever was applied before the failure stays; the rest keep defaults
            print(f"[Config] Error loading {self.settings_file}: {e}")

    def _assign(self, name: str, raw: Any) -> None:
        """Coerce raw to the type of the current value and store it."""
        current = getattr(self, name)

        if name in CHOICES:
            value = str(raw).strip().lower()
            if value not in CHOICES[name]:
                print(f"[Config] Ignoring invalid {name}: {value!r} "
                      f"(expected one of {', '.join(CHOICES[name])})")
                return
        elif isinstance(current, bool):
            value = raw.strip().lower() in ("1", "true", "yes", "on") if isinstance(raw, str) else bool(raw)
        else:
            value = type(current)(raw)

        setattr(self, name, value)

    def save_settings(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        data = {name: getattr(self, name) for name in SETTING_NAMES}
        self.settings_file.write_text(json.dumps(data, indent=2))

    def snapshot(self) -> ConfigSnapshot:
        """Frozen copy; later edits to this Config don't reach a running engine."""
        return ConfigSnapshot(**{name: getattr(self, name) for name in SETTING_NAMES})
