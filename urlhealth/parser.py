"""Нормализация адресов и разбор списка URL."""

from __future__ import annotations

from pathlib import Path

# Схемы, которые считаются уже заданными.
SCHEME_PREFIXES: tuple[str, ...] = ("http://", "https://")
DEFAULT_SCHEME_PREFIX = "https://"

COMMENT_PREFIX = "#"


def normalize_url(raw: str) -> str:
    """Добавляет схему https://, если адрес не начинается с http:// или https://.

    Никогда не падает: некорректный адрес возвращается как есть (с префиксом),
    его отклонит транспорт при попытке запроса.
    """
    if raw.startswith(SCHEME_PREFIXES):
        return raw
    return DEFAULT_SCHEME_PREFIX + raw


def parse_url_list(text: str) -> list[str]:
    """Разбирает текст со списком URL (по одному на строку).

    Пустые строки и строки, начинающиеся с ``#``, пропускаются.
    """
    urls: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        urls.append(line)
    return urls


def load_url_file(path: str | Path) -> list[str]:
    """Читает файл со списком URL."""
    return parse_url_list(Path(path).read_text(encoding="utf-8"))
