import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List
from system.log_utils import debug, warn, error

# --- Preference Keys ---
VALID_PREF_KEYS = [
        "default_speed",
        "brake_settle_ms",
        "poll_interval_ms",
        "button_debounce_ms",
        "simulator_enabled",
        "selected_program",
    ]

KEY_DEFAULT_SPEED        = VALID_PREF_KEYS[0]
KEY_BRAKE_SETTLE_MS      = VALID_PREF_KEYS[1]
KEY_POLL_INTERVAL_MS     = VALID_PREF_KEYS[2]
KEY_BUTTON_DEBOUNCE_MS   = VALID_PREF_KEYS[3]
KEY_SIMULATOR_ENABLED    = VALID_PREF_KEYS[4]
KEY_SELECTED_PROGRAM     = VALID_PREF_KEYS[5]

DEFAULT_PREFS_FILE = os.environ.get("WASHER_PREFS_FILE", "config/user_prefs.json")

DEFAULTS: Dict[str, Any] = {
    KEY_DEFAULT_SPEED: 128,
    KEY_BRAKE_SETTLE_MS: 1800,
    KEY_POLL_INTERVAL_MS: 50,
    KEY_BUTTON_DEBOUNCE_MS: 50,
    KEY_SIMULATOR_ENABLED: False,
    KEY_SELECTED_PROGRAM: 1,
}


class Preferences:
    """
    Simple JSON-based preference store with defaults
    and callback support.
    """

    def __init__(self, filename: str = DEFAULT_PREFS_FILE):
        self.file = Path(filename)
        self.data: Dict[str, Any] = {}
        self._callbacks: Dict[str, List[Callable[[Any], None]]] = {}
        self._load()

    # ------------------------------------------------------------------
    # Core file ops
    # ------------------------------------------------------------------

    def _load(self):
        if not self.file.exists():
            debug(f"[PREFS] file not found, using defaults ({self.file})")
            self.data = {}
            return
        try:
            with open(self.file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            error(f"[PREFS] load failed: {e}")
            self.data = {}
            return

        if not isinstance(loaded, dict):
            error(f"[PREFS] ignoring {self.file}: top level is not an object")
            self.data = {}
            return

        unknown = [k for k in loaded if k not in VALID_PREF_KEYS]
        if unknown:
            warn(f"[PREFS] ignoring unknown keys: {unknown}")
        self.data = {k: v for k, v in loaded.items() if k in VALID_PREF_KEYS}

    def save(self):
        """Public save method."""
        try:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.file, "w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            error(f"[PREFS] save failed: {e}")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        if default is None:
            default = DEFAULTS.get(key)
        return self.data.get(key, default)

    def get_int(self, key: str, default: int = None) -> int:
        if default is None:
            default = int(DEFAULTS.get(key, 0))
        try:
            return int(self.data.get(key, default))
        except (TypeError, ValueError):
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        try:
            return float(self.data.get(key, default))
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = None) -> bool:
        if default is None:
            default = bool(DEFAULTS.get(key, False))
        value = self.data.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes", "on")
        return bool(value)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def update_from_dict(self, d: Dict[str, Any], write_disk: bool = False) -> List[str]:
        """Update preferences from dictionary.

        Args:
            d: Dictionary of key-value pairs to update
            write_disk: If True, saves to disk. If False, updates memory only.
        """
        updated = []
        for k, v in d.items():
            if k not in VALID_PREF_KEYS:
                continue

            if k not in self.data or self.data[k] != v:
                self.data[k] = v
                updated.append(k)
            else:
                debug(f"[PREFS] skipping {k}, value unchanged")

        if updated:
            debug(f"[PREFS] updating keys: {updated}")
            if write_disk:
                self.save()
            for k in updated:
                self._notify(k, self.data[k])

        return updated

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def register_callback(self, key: str, cb: Callable[[Any], None]):
        self._callbacks.setdefault(key, []).append(cb)

    def _notify(self, key: str, value: Any):
        for cb in self._callbacks.get(key, []):
            try:
                cb(value)
            except Exception as e:
                warn(f"[PREFS] callback for '{key}' failed: {e}")

    # ------------------------------------------------------------------

    def as_dict(self) -> Dict[str, Any]:
        merged = dict(DEFAULTS)
        merged.update(self.data)
        return merged
