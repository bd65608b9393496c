from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, IOSettings, LayoutSettings
from domain.models import AutoLayoutConfig


def _clear_autofit_env() -> None:
    for key in list(os.environ):
        if key.startswith("AUTOFIT_"):
            os.environ.pop(key, None)


_clear_autofit_env()


@pytest.fixture(autouse=True)
def clear_autofit_env() -> Generator[None, None, None]:
    _clear_autofit_env()
    yield
    _clear_autofit_env()


@pytest.fixture
def layout_config() -> AutoLayoutConfig:
    return AutoLayoutConfig()


@pytest.fixture
def io_settings(tmp_path: Path) -> IOSettings:
    return IOSettings(
        input_dir=tmp_path / "excalidraw_in",
        output_dir=tmp_path / "excalidraw_out",
        excalidraw_base_url="https://excalidraw.com/",
        excalidraw_max_url_length=8000,
    )


@pytest.fixture
def io_settings_factory(io_settings: IOSettings) -> Callable[..., IOSettings]:
    def _factory(**overrides: object) -> IOSettings:
        return io_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(io_settings: IOSettings) -> AppSettings:
    return AppSettings(title="Test Autofit", layout=LayoutSettings(), io=io_settings)


@pytest.fixture
def app_settings_factory(
    io_settings_factory: Callable[..., IOSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(title="Test Autofit", io=io_settings_factory(**overrides))

    return _factory
