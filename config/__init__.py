import json
import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unrecognised means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def shift_bands_from_env():
    """Optional explicit band table, e.g.
    SHIFT_BANDS='[{"band_id": "day", "name": "Day", "start": "07:00", "end": "19:00"}, ...]'
    """
    raw = os.getenv("SHIFT_BANDS", "").strip()
    return json.loads(raw) if raw else None
