"""User-facing strings for DermaVision AI.

Usage: from i18n import t; t("key", name=value)
"""

import json
import sys
from pathlib import Path

_strings: dict = {}


def _get_i18n_dir() -> Path:
    """Get the directory containing the string table."""
    if getattr(sys, "frozen", False):
        return Path(sys._MEIPASS) / "i18n"
    return Path(__file__).parent


def _load_json(name: str) -> dict:
    path = _get_i18n_dir() / f"{name}.json"
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def init():
    """Load the string table. Call once at app startup."""
    global _strings
    _strings = _load_json("en")


def t(key: str, **kwargs) -> str:
    """Look up a string with optional format arguments; unknown keys return the key."""
    text = _strings.get(key) or key
    if kwargs:
        try:
            return text.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return text
    return text
