"""
ASCII normalization for values that end up in emails, usernames, URLs and file names.

Only a fixed subset of Chinese characters is mapped; anything unmapped passes
through `transliterate` untouched and is then dropped by the stricter helpers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_TURKISH = {
    "ç": "c", "Ç": "C", "ğ": "g", "Ğ": "G", "ı": "i", "İ": "I",
    "ö": "o", "Ö": "O", "ş": "s", "Ş": "S", "ü": "u", "Ü": "U",
}

_RUSSIAN_LOWER = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}
_RUSSIAN = dict(_RUSSIAN_LOWER)
_RUSSIAN.update({k.upper(): v.capitalize() for k, v in _RUSSIAN_LOWER.items()})

_CHINESE = {
    "龙": "long", "虎": "hu", "凤": "feng", "鹰": "ying", "狼": "lang",
    "狮": "shi", "豹": "bao", "熊": "xiong", "鲨": "sha", "鲸": "jing",
    "金": "jin", "银": "yin", "铜": "tong", "铁": "tie", "玉": "yu",
    "王": "wang", "李": "li", "张": "zhang", "刘": "liu", "陈": "chen",
    "杨": "yang", "黄": "huang", "赵": "zhao", "吴": "wu", "周": "zhou",
    "伟": "wei", "磊": "lei", "军": "jun", "强": "qiang", "勇": "yong",
    "芳": "fang", "娜": "na", "秀": "xiu", "丽": "li", "静": "jing",
    "超": "chao", "星": "xing", "天": "tian", "海": "hai", "火": "huo",
}

_TRANSLIT = {}
_TRANSLIT.update(_CHINESE)
_TRANSLIT.update(_RUSSIAN)
_TRANSLIT.update(_TURKISH)
_TRANSLIT_TABLE = str.maketrans(_TRANSLIT)

_NON_WORD_KEEP_SPACE_DASH = re.compile(r"[^\w\s-]", re.ASCII)
_NON_WORD = re.compile(r"[^\w]", re.ASCII)
_NON_LETTER_KEEP_SPACE = re.compile(r"[^a-z\s]")


def transliterate(text: str) -> str:
    return text.translate(_TRANSLIT_TABLE)


def to_slug(text: str) -> str:
    s = transliterate(text).lower().strip()
    s = _NON_WORD_KEEP_SPACE_DASH.sub("", s)
    s = re.sub(r"[\s_]+", "-", s)
    s = re.sub(r"-+", "-", s)
    return s.strip("-")


def to_file_name(text: str, separator: str = "_") -> str:
    if separator not in ("_", "-"):
        raise ValueError(f"separator must be '_' or '-', got {separator!r}")
    s = transliterate(text).lower().strip()
    s = _NON_WORD_KEEP_SPACE_DASH.sub("", s)
    s = re.sub(r"\s+", separator, s)
    s = re.sub(re.escape(separator) + "+", separator, s)
    return s.strip(separator)


def to_username(text: str) -> str:
    s = _NON_WORD.sub("", transliterate(text).lower())
    s = re.sub(r"_{2,}", "_", s)
    return s.strip("_")


@dataclass(frozen=True)
class ParsedName:
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        if self.first_name == self.last_name:
            return self.first_name
        return f"{self.first_name} {self.last_name}"


def parse_name_value(value: str) -> Optional[ParsedName]:
    """Split a display name into lower-case ASCII first/last tokens."""
    clean = _NON_LETTER_KEEP_SPACE.sub("", transliterate(value.strip().lower()).lower())
    parts = clean.split()
    if not parts:
        return None
    return ParsedName(first_name=parts[0], last_name=parts[-1])


def parse_name_from_context(based_on: Optional[str], context: Mapping[str, Any]) -> Optional[ParsedName]:
    if not based_on or based_on not in context:
        return None
    value = context[based_on]
    if not isinstance(value, str) or not value.strip():
        return None
    return parse_name_value(value)
