# toolbox/layout/defaults.py
from __future__ import annotations

from typing import Any

# Canonical launcher entries. Positions are computed at runtime by
# geometry.compute_default_layout; only identity and appearance live here.
DEFAULT_APPS: list[dict[str, Any]] = [
    {"id": "anilist", "name": "AniList", "path": "/anilist", "icon": "📊", "color": "#667eea"},
    {"id": "media-search", "name": "Recherche Anime/Manga", "path": "/anilist/media-search", "icon": "🔍", "color": "#ff5757"},
    {"id": "meteo", "name": "Météo", "path": "/meteo", "icon": "🌤️", "color": "#38bdf8"},
    {"id": "calculator", "name": "Calculatrice", "path": "/calculator", "icon": "🧮", "color": "#f59e0b"},
    {"id": "countdown", "name": "Compte à rebours", "path": "/countdown", "icon": "⏳", "color": "#10b981"},
    {"id": "date-calculator", "name": "Calcul de dates", "path": "/date-calculator", "icon": "📅", "color": "#8b5cf6"},
    {"id": "encoder", "name": "Encodeur", "path": "/encoder", "icon": "🔐", "color": "#ef4444"},
    {"id": "file-diff", "name": "Comparateur", "path": "/file-diff", "icon": "📝", "color": "#14b8a6"},
    {"id": "formatter", "name": "Formateur", "path": "/formatter", "icon": "✨", "color": "#ec4899"},
    {"id": "settings", "name": "Paramètres", "path": "/settings", "icon": "⚙️", "color": "#64748b"},
]
