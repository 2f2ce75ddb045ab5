# File: sitemap_scout/utils.py
"""sitemap_scout.utils: Утилиты для нормализации URL, проверки домена и фильтрации не-страниц."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Any, Optional, Sequence
from urllib.parse import quote, urlsplit, urlunsplit

from sitemap_scout.logger import logger

__all__: Sequence[str] = (
    "NON_PAGE_EXTENSIONS",
    "normalize_url",
    "in_scope",
    "extract_host",
    "is_page_url",
)

NON_PAGE_EXTENSIONS: frozenset[str] = frozenset(
    {
        # images
        ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".ico", ".bmp", ".avif", ".tif", ".tiff",
        # archives
        ".zip", ".tar", ".gz", ".tgz", ".rar", ".7z", ".bz2", ".xz",
        # styles & scripts
        ".css", ".js", ".mjs", ".map",
        # documents, media, fonts
        ".pdf", ".mp3", ".mp4", ".webm", ".avi", ".mov",
        ".woff", ".woff2", ".ttf", ".eot", ".otf",
    }
)

# C0 controls and DEL are percent-encoded in path and query, refused in the host
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
# no XML 1.0 document may carry these, escaped or not
_NON_XML_RE = re.compile("[\ud800-\udfff\ufffe\uffff]")


def _escape_controls(part: str) -> str:
    return _CONTROL_RE.sub(lambda m: quote(m.group(0), safe=""), part)


def normalize_url(raw: Any) -> Optional[str]:
    """Приводит абсолютный URL к ключу дедупликации или возвращает None.

    Фрагмент отбрасывается, завершающий ``/`` срезается. Хост не приводится
    к нижнему регистру, порт по умолчанию и порядок параметров запроса
    сохраняются: ``?a=1&b=2`` и ``?b=2&a=1`` остаются разными страницами.
    Управляющие символы в пути и запросе кодируются (``\\x01`` -> ``%01``),
    чтобы ключ всегда можно было записать в sitemap.
    """
    if not isinstance(raw, str):
        logger.debug("Dropping non-string URL: %r", raw)
        return None
    try:
        parts = urlsplit(raw.strip())
        parts.port  # invalid ports only surface on access
    except ValueError as exc:
        logger.debug("Dropping unparseable URL %r: %s", raw, exc)
        return None
    if not parts.scheme or not parts.netloc:
        logger.debug("Dropping relative or host-less URL: %r", raw)
        return None
    if _CONTROL_RE.search(parts.netloc) or _NON_XML_RE.search(raw):
        logger.debug("Dropping URL with characters unfit for XML: %r", raw)
        return None

    path, query = _escape_controls(parts.path), _escape_controls(parts.query).rstrip("/")
    # the slash ends the URL only when no query follows it
    if not query:
        path = path.rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, path, query, ""))


def extract_host(url: str) -> Optional[str]:
    """Возвращает hostname (без порта) или None для некорректного URL."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def in_scope(candidate: Optional[str], root: str) -> bool:
    """True, если хост кандидата совпадает с хостом корня обхода.

    Схема не учитывается (http и https одного хоста равноправны),
    поддомены считаются чужими.
    """
    if not candidate:
        return False
    host = extract_host(candidate)
    return host is not None and host == extract_host(root)


def is_page_url(url: str) -> bool:
    """False для ссылок на картинки, архивы, стили, скрипты, pdf и медиа."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return False
    return PurePosixPath(path).suffix.lower() not in NON_PAGE_EXTENSIONS
