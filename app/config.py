from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import AutoLayoutConfig

DEFAULT_CONFIG_PATH = Path("config/autofit.yaml")

_HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)


def _validate_base_url(value: str) -> str:
    normalized = str(value or "").strip()
    _HTTP_URL_ADAPTER.validate_python(normalized)
    return normalized


BaseUrl = Annotated[str, AfterValidator(_validate_base_url)]


class LayoutSettings(BaseModel):
    padding: float = Field(default=20.0, ge=0)
    min_width: float = Field(default=100.0, ge=0)
    min_height: float = Field(default=50.0, ge=0)
    label_char_width: float = Field(default=10.0, gt=0)
    line_height: float = Field(default=25.0, gt=0)
    ellipse_width_scale: float = Field(default=1.6, ge=1)
    default_width_scale: float = Field(default=1.3, ge=1)

    def to_layout_config(self) -> AutoLayoutConfig:
        return AutoLayoutConfig(
            padding=self.padding,
            min_width=self.min_width,
            min_height=self.min_height,
            label_char_width=self.label_char_width,
            line_height=self.line_height,
            ellipse_width_scale=self.ellipse_width_scale,
            default_width_scale=self.default_width_scale,
        )


class IOSettings(BaseModel):
    input_dir: Path = Path("data/excalidraw_in")
    output_dir: Path = Path("data/excalidraw_out")
    excalidraw_base_url: BaseUrl = "https://excalidraw.com/"
    excalidraw_max_url_length: int = Field(default=8000, gt=0)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AUTOFIT_", env_nested_delimiter="__")

    title: str = "Diagram Autofit"
    layout: LayoutSettings = LayoutSettings()
    io: IOSettings = IOSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("AUTOFIT_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
