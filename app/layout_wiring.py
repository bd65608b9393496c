from __future__ import annotations

from app.config import AppSettings
from domain.services.auto_layout import AutoLayoutEngine


def build_layout_engine(settings: AppSettings) -> AutoLayoutEngine:
    return AutoLayoutEngine(settings.layout.to_layout_config())
