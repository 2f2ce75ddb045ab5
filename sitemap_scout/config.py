# === FILE: sitemap_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации генератора карты сайта.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)


class SitemapConfig(BaseModel):
    """Конфигурация сервиса: корни обхода, лимиты, расписание и вывод."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    subdomains: list[HttpUrl] = Field(..., min_length=1, description="Корневые URL обхода (по порядку).")
    max_depth: int = Field(10, ge=0, description="Максимальная глубина от корня.")
    max_pages: Optional[int] = Field(None, ge=1, description="Общий лимит страниц за один прогон.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на одну загрузку (секунд).")
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; SitemapBot/1.0)", min_length=1, description="Заголовок User-Agent."
    )
    concurrency: int = Field(1, ge=1, description="Число одновременных загрузок.")
    interval: float = Field(3600.0, gt=0, description="Период повторного обхода (секунд).")
    output_path: Path = Field(Path("public/sitemap.xml"), description="Куда писать sitemap.xml.")
    backend: Literal["static", "browser"] = Field(
        "static", description="static: aiohttp + разбор HTML; browser: рендеринг через Playwright."
    )
    scan_raw_content: bool = Field(True, description="Искать URL в сыром содержимом страницы.")
    host: str = Field("0.0.0.0", description="Адрес HTTP-сервера.")
    port: int = Field(3000, ge=0, le=65535, description="Порт HTTP-сервера.")

    @field_validator("subdomains", mode="before")
    def _strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [item.strip() if isinstance(item, str) else item for item in v]
        return v

    @property
    def roots(self) -> list[str]:
        """Корни обхода в виде строк, в порядке из конфига."""
        return [str(url) for url in self.subdomains]


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> SitemapConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект SitemapConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return SitemapConfig(**data)


__all__ = ["SitemapConfig", "load_config", "ValidationError"]
