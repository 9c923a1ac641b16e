"""
Colour skins for the dashboard.

A skin only changes colours. Every skin drives the same store and engine.
"""

SKINS = {
    "nexus": {
        "positive": "#22d3ee",
        "negative": "#f43f5e",
        "neutral": "#a1a1aa",
        "accent": "#06b6d4",
        "background": "#050505",
        "surface": "rgba(24,24,27,0.6)",
        "text": "#ffffff",
    },
    "ember": {
        "positive": "#5a9e6f",
        "negative": "#c45c4a",
        "neutral": "#9c9588",
        "accent": "#d97757",
        "background": "#1a1915",
        "surface": "#2d2b26",
        "text": "#e8e0d5",
    },
    "mono": {
        "positive": "#e5e5e5",
        "negative": "#737373",
        "neutral": "#a3a3a3",
        "accent": "#fafafa",
        "background": "#0a0a0a",
        "surface": "#171717",
        "text": "#fafafa",
    },
}


def get_skin(name: str) -> dict:
    """Palette for `name`; unknown names fall back to "nexus"."""
    return SKINS.get(name, SKINS["nexus"])


def score_color(skin: dict, value: int) -> str:
    if value > 0:
        return skin["positive"]
    if value < 0:
        return skin["negative"]
    return skin["neutral"]
