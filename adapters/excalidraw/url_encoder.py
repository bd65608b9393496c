from __future__ import annotations

import json
from typing import Any, cast

from lzstring import LZString  # type: ignore[import-untyped]

DEFAULT_MAX_URL_LENGTH = 8000


class ExcalidrawUrlTooLongError(ValueError):
    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(f"Excalidraw URL is {length} characters long, limit is {max_length}")
        self.length = length
        self.max_length = max_length


def encode_scene_payload(scene: dict[str, Any]) -> str:
    payload = json.dumps(scene, ensure_ascii=True, separators=(",", ":"))
    encoded = LZString().compressToEncodedURIComponent(payload)
    return cast(str, encoded)


def build_excalidraw_url(
    base_url: str,
    scene: dict[str, Any],
    max_length: int | None = DEFAULT_MAX_URL_LENGTH,
) -> str:
    clean_base = base_url.split("#", 1)[0]
    url = f"{clean_base}#json={encode_scene_payload(scene)}"
    if max_length is not None and len(url) > max_length:
        raise ExcalidrawUrlTooLongError(len(url), max_length)
    return url
