"""
Session Settings for the scenario playback engine.

v1.0: Named presets for the live tick loop and alarm handling.

Settings are injected into sessions at construction. Nothing here is read
from ambient storage.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class SessionSettings:
    """
    Runtime settings for one playback session.

    tick_interval_sec drives the SessionRunner. critical_margin_fraction is
    read by reporting.result_flags.flag_panel when deriving critical bounds.
    """
    name: str

    # === Tick loop ===
    tick_interval_sec: float = 1.0          # Fixed interval between ticks

    # === Alarm handling ===
    default_snooze_sec: float = 300.0       # 5 minutes, as on the bedside monitor

    # === Derived critical ranges ===
    critical_margin_fraction: float = 0.3   # Fraction of normal span beyond each bound

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if self.tick_interval_sec <= 0:
            raise ValueError(f"tick_interval_sec must be > 0, got {self.tick_interval_sec}")
        if self.default_snooze_sec < 0:
            raise ValueError(f"default_snooze_sec must be >= 0, got {self.default_snooze_sec}")
        if self.critical_margin_fraction < 0:
            raise ValueError(
                f"critical_margin_fraction must be >= 0, got {self.critical_margin_fraction}"
            )
        return True


# =============================================================================
# Preset Definitions
# =============================================================================

SESSION_PRESETS: Dict[str, SessionSettings] = {
    # One tick per second, matching the monitor refresh
    "realtime": SessionSettings(name="realtime"),

    # Faster ticks for debriefing replays and tests
    "accelerated": SessionSettings(
        name="accelerated",
        tick_interval_sec=0.1,
        default_snooze_sec=30.0,
    ),
}


def get_session_settings(name: str = "realtime") -> SessionSettings:
    """
    Get a preset by name.

    Raises:
        KeyError: if the preset does not exist
    """
    if name not in SESSION_PRESETS:
        raise KeyError(f"Unknown session preset {name!r}; choose from {sorted(SESSION_PRESETS)}")
    settings = SESSION_PRESETS[name]
    settings.validate()
    return settings


def get_default_settings() -> SessionSettings:
    """Get the production default preset."""
    return get_session_settings("realtime")
