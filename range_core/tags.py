# range_core/tags.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from PIL import ImageColor

from .storage import KeyValueStore, TAG_NAMES_KEY, read_json, write_json

logger = logging.getLogger("range_builder.core.tags")

FALLBACK_RGB = "C0C0C0"


@dataclass(frozen=True)
class Tag:
    tag_id: str        # 色名を兼ねる（"green" など）
    default_name: str


BUILTIN_TAGS = (
    Tag("green", "Green"),
    Tag("red", "Red"),
    Tag("yellow", "Yellow"),
)
_BUILTIN_BY_ID = {t.tag_id: t for t in BUILTIN_TAGS}


def default_name_for(tag_id: str) -> str:
    builtin = _BUILTIN_BY_ID.get(tag_id)
    if builtin is not None:
        return builtin.default_name
    return (tag_id or "").capitalize()


def tag_rgb(tag_id: Optional[str]) -> str:
    """
    tag_id（CSS色名 or "#RRGGBB"）を 6桁HEX(大文字) にする。
    解決できないものは灰色。
    """
    if not tag_id:
        return FALLBACK_RGB
    try:
        rgb = ImageColor.getrgb(tag_id)
    except ValueError:
        return FALLBACK_RGB
    r, g, b = rgb[:3]
    return f"{r:02X}{g:02X}{b:02X}"


class TagRegistry:
    """
    tag の表示名を持つ。tag 自体は削除されない（rename のみ）。
    「いま塗りに使う tag」は controller 側の状態でここには持たない。
    """

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        self._store = store
        self._names: Dict[str, str] = {}
        self.restore()

    def restore(self) -> None:
        self._names = {}
        if self._store is None:
            return

        data = read_json(self._store, TAG_NAMES_KEY, None)
        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning("[TAGS] %s is not an object, using defaults", TAG_NAMES_KEY)
            return

        for tag_id, name in data.items():
            if not isinstance(name, str):
                logger.warning("[TAGS] skip non-string name for tag=%r", tag_id)
                continue
            self._names[str(tag_id)] = name

    def persist(self) -> None:
        if self._store is None:
            return
        write_json(self._store, TAG_NAMES_KEY, self.names())

    # -------------------------
    # Public
    # -------------------------
    def rename(self, tag_id: str, new_name: str) -> None:
        # 空文字もそのまま受け入れる（表示側の問題）
        self._names[tag_id] = str(new_name)
        self.persist()
        logger.debug("[TAGS] renamed %s -> %r", tag_id, new_name)

    def display_name(self, tag_id: str) -> str:
        if tag_id in self._names:
            return self._names[tag_id]
        return default_name_for(tag_id)

    def tags(self) -> List[str]:
        out = [t.tag_id for t in BUILTIN_TAGS]
        out.extend(t for t in self._names if t not in _BUILTIN_BY_ID)
        return out

    def names(self) -> Dict[str, str]:
        return {t: self.display_name(t) for t in self.tags()}

    def color_rgb(self, tag_id: Optional[str]) -> str:
        return tag_rgb(tag_id)
