from typing import Dict, Optional, Tuple

DEFAULT_THEME = "elegant"

THEMES: Dict[str, Dict[str, str]] = {
    "elegant": {
        "primary": "#6366f1",  # indigo
        "secondary": "#8b5cf6",  # purple
        "accent": "#ec4899",  # pink
        "background": "#ffffff",
        "text": "#1f2937",
        "gradient": "linear-gradient(135deg, #6366f1 0%, #8b5cf6 50%, #ec4899 100%)",
        "surface": "#f9fafb",
        "muted": "#6b7280",
    },
    "coffee": {
        "primary": "#92400e",  # amber/brown
        "secondary": "#b45309",
        "accent": "#f59e0b",
        "background": "#f5f5f4",
        "text": "#44403c",
        "gradient": "linear-gradient(135deg, #92400e 0%, #b45309 50%, #f59e0b 100%)",
        "surface": "#fafaf9",
        "muted": "#78716c",
    },
    "dark": {
        "primary": "#3b82f6",  # blue
        "secondary": "#0ea5e9",  # sky
        "accent": "#8b5cf6",
        "background": "#0f172a",
        "text": "#e2e8f0",
        "gradient": "linear-gradient(135deg, #1e293b 0%, #3b82f6 50%, #8b5cf6 100%)",
        "surface": "#1e293b",
        "muted": "#94a3b8",
    },
    "nature": {
        "primary": "#10b981",  # emerald
        "secondary": "#059669",
        "accent": "#f59e0b",
        "background": "#f0fdf4",
        "text": "#1f2937",
        "gradient": "linear-gradient(135deg, #059669 0%, #10b981 50%, #a3e635 100%)",
        "surface": "#ecfdf5",
        "muted": "#4b5563",
    },
    "tech": {
        "primary": "#8b5cf6",  # purple
        "secondary": "#7c3aed",  # violet
        "accent": "#06b6d4",  # cyan
        "background": "#f8fafc",
        "text": "#0f172a",
        "gradient": "linear-gradient(135deg, #7c3aed 0%, #8b5cf6 50%, #06b6d4 100%)",
        "surface": "#f1f5f9",
        "muted": "#64748b",
    },
}

# Checked in order, first hit wins
THEME_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("dark", ("dark theme", "dark mode")),
    ("coffee", ("coffee", "cafe", "restaurant")),
    ("tech", ("tech", "software", "digital")),
    ("nature", ("nature", "eco", "organic")),
    ("elegant", ("luxury", "elegant", "professional")),
)


def resolve_theme(prompt: Optional[str]) -> str:
    text = (prompt or "").lower()
    for theme, keywords in THEME_RULES:
        if any(keyword in text for keyword in keywords):
            return theme
    return DEFAULT_THEME


def get_palette(theme: Optional[str]) -> Dict[str, str]:
    """Return a copy of the palette for ``theme``, falling back to the default theme."""
    palette = THEMES.get(theme or "") or THEMES[DEFAULT_THEME]
    return dict(palette)


def list_themes() -> Dict[str, Dict[str, str]]:
    return {name: dict(palette) for name, palette in THEMES.items()}
