# File: sitemap_scout/server.py
"""sitemap_scout.server: HTTP-обёртка, отдающая sitemap.xml и страницу статуса."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from aiohttp import web
from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitemap_scout.config import SitemapConfig
from sitemap_scout.engine import Engine
from sitemap_scout.sitemap import parse_sitemap

__all__ = ["create_app", "status_snapshot"]

TEMPLATE_DIR = Path(__file__).parent / "templates"

CONFIG_KEY = web.AppKey("config", SitemapConfig)
ENGINE_KEY = web.AppKey("engine", object)
TEMPLATES_KEY = web.AppKey("templates", Environment)


def _count_on_disk(path: Path) -> int:
    if not path.is_file():
        return 0
    return len(parse_sitemap(path.read_bytes()))


def status_snapshot(config: SitemapConfig, engine: Optional[Engine] = None) -> dict[str, Any]:
    """Состояние сервиса для страницы статуса и /status."""
    report = engine.last_report if engine else None
    return {
        "status": "running",
        "roots": config.roots,
        "interval": config.interval,
        "running": bool(engine and engine.running),
        "runs": engine.runs if engine else 0,
        "urls_on_disk": _count_on_disk(config.output_path),
        "last_run": report.as_dict() if report else None,
    }


async def handle_sitemap(request: web.Request) -> web.StreamResponse:
    path = request.app[CONFIG_KEY].output_path
    if not path.is_file():
        raise web.HTTPNotFound(text="Sitemap has not been generated yet")
    return web.FileResponse(path, headers={"Content-Type": "application/xml"})


async def handle_index(request: web.Request) -> web.Response:
    snapshot = status_snapshot(request.app[CONFIG_KEY], request.app[ENGINE_KEY])
    template = request.app[TEMPLATES_KEY].get_template("status.html.j2")
    return web.Response(text=template.render(**snapshot), content_type="text/html")


async def handle_status(request: web.Request) -> web.Response:
    return web.json_response(status_snapshot(request.app[CONFIG_KEY], request.app[ENGINE_KEY]))


def create_app(config: SitemapConfig, engine: Optional[Engine] = None) -> web.Application:
    app = web.Application()
    app[CONFIG_KEY] = config
    app[ENGINE_KEY] = engine
    app[TEMPLATES_KEY] = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    app.router.add_get("/", handle_index)
    app.router.add_get("/status", handle_status)
    app.router.add_get("/sitemap.xml", handle_sitemap)
    return app
