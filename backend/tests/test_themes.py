import pytest

from brix.services.themes import THEMES, get_palette, list_themes, resolve_theme

PALETTE_KEYS = {"primary", "secondary", "accent", "background", "text", "gradient", "surface", "muted"}


@pytest.mark.parametrize(
    "prompt,expected",
    [
        ("a cozy coffee shop website", "coffee"),
        ("Italian RESTAURANT with online booking", "coffee"),
        ("landing page for a software startup", "tech"),
        ("organic farm shop", "nature"),
        ("luxury watch boutique", "elegant"),
        ("portfolio with a dark mode toggle for a coffee roaster", "dark"),
        ("plumbing services", "elegant"),
        ("", "elegant"),
        (None, "elegant"),
    ],
)
def test_resolve_theme(prompt, expected):
    assert resolve_theme(prompt) == expected


def test_resolve_theme_is_deterministic():
    prompt = "digital agency for eco brands"
    assert {resolve_theme(prompt) for _ in range(5)} == {"tech"}


def test_every_theme_has_a_full_palette():
    for name in ("elegant", "coffee", "dark", "nature", "tech"):
        assert set(get_palette(name)) == PALETTE_KEYS


def test_coffee_palette_is_amber():
    palette = get_palette("coffee")
    assert palette["primary"] == "#92400e"
    assert palette["accent"] == "#f59e0b"


def test_unknown_theme_falls_back_to_elegant():
    assert get_palette("neon") == THEMES["elegant"]
    assert get_palette(None) == THEMES["elegant"]


def test_palettes_are_copies():
    palette = get_palette("tech")
    palette["primary"] = "#000000"
    assert THEMES["tech"]["primary"] == "#8b5cf6"
    list_themes()["tech"]["primary"] = "#000000"
    assert THEMES["tech"]["primary"] == "#8b5cf6"
