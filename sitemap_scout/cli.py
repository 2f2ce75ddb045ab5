# === FILE: sitemap_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа генератора карты сайта SitemapScout через командную строку.

Команды:
  serve     Обход по расписанию + HTTP-сервер (/sitemap.xml, /, /status)
  crawl     Один полный прогон, затем выход
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --limit INT         Макс. число страниц за прогон (override max_pages)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию SitemapScout

Пример:
  sitemap-scout --config configs/default.yaml crawl --output public/sitemap.xml
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from sitemap_scout import __version__
from sitemap_scout.config import load_config
from sitemap_scout.engine import generate_sitemap
from sitemap_scout.logger import init_logging
from sitemap_scout.service import serve

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число страниц за прогон (override max_pages)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """Группа команд SitemapScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if limit is not None:
        cfg = cfg.model_copy(update={'max_pages': limit})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output', '-o', 'output_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Куда сохранить sitemap.xml (override output_path)'
)
@click.pass_context
def crawl(ctx, output_path):
    """Выполнить один прогон и записать sitemap."""
    cfg = ctx.obj['config']
    if output_path is not None:
        cfg = cfg.model_copy(update={'output_path': output_path})
    try:
        report = asyncio.run(generate_sitemap(cfg))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    summary = {
        'count': report.count,
        'output': str(cfg.output_path),
        'urls': report.urls,
        'failed': report.failed,
    }
    click.echo(json.dumps(summary, ensure_ascii=False, indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес HTTP-сервера (override host)')
@click.option('--port', '-p', type=click.IntRange(0, 65535), default=None, help='Порт (override port)')
@click.pass_context
def serve_command(ctx, host, port):
    """Запустить обход по расписанию и HTTP-сервер до сигнала остановки."""
    cfg = ctx.obj['config']
    update = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    if update:
        cfg = cfg.model_copy(update=update)
    try:
        asyncio.run(serve(cfg))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print_error(f'Ошибка сервиса: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
