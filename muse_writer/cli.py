import click
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import Config
from .critique import (
    CritiqueData,
    background_tier,
    color_tier,
    content_fingerprint,
    locate_quote,
    parse_critique,
    width_percent,
)
from .critique.cache import open_file_cache
from .critique.locate import quote_context
from .critique.scoring import score_style
from .editing import analyze_differences, merge_paragraphs
from .utils.logger import reset_logger, setup_logger

console = Console()

CHANGE_STYLES = {
    "added": "green",
    "removed": "red",
    "modified": "yellow",
    "unchanged": "dim",
}


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _score_bar(score: int, width: int = 20) -> str:
    filled = round(width * width_percent(score) / 100)
    return f"[{score_style(score)}]{'█' * filled}[/]{'░' * (width - filled)}"


def render_critique(data: CritiqueData) -> None:
    """Print a parsed critique as score table, sections and suggestions."""
    if data.scores:
        table = Table(title="評分")
        table.add_column("維度")
        table.add_column("分數", justify="right")
        table.add_column("")
        for score in data.scores:
            table.add_row(
                score.name,
                f"[{score_style(score.value)}]{score.value}[/]",
                _score_bar(score.value),
            )
        console.print(table)

    for section in data.sections:
        title = section.title
        style = "blue"
        if section.rating is not None:
            title = f"{title}  ({section.rating}/10)"
            style = background_tier(section.rating).border
        console.print(Panel(Text(section.content or "-"), title=Text(title), border_style=style))

    if data.suggestions:
        console.print("[bold]修改建議[/bold]")
        for i, suggestion in enumerate(data.suggestions, 1):
            console.print(f"  {i}. {suggestion}", markup=False)

    summary = data.summary
    if summary.overall_score:
        tier = color_tier(summary.overall_score)
        console.print(
            f"\n總體評分: [{score_style(summary.overall_score)}]{summary.overall_score}/10[/] ({tier.value})"
        )
    if summary.one_sentence:
        console.print(f"一句話總結: {summary.one_sentence}", markup=False)


@click.group()
@click.option('--config', '-c', type=click.Path(), default='config.yaml',
              help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool):
    """Muse Writer - critique, cache and revise novel chapters."""
    ctx.ensure_object(dict)

    config_path = Path(config)
    if config_path.exists():
        ctx.obj['config'] = Config.from_yaml(config_path).with_env()
    else:
        ctx.obj['config'] = Config().with_env()

    log_level = "DEBUG" if verbose else ctx.obj['config'].log_level
    reset_logger()
    logger = setup_logger(log_level)
    ctx.obj['logger'] = logger

    logger.debug(f"Muse Writer v{__version__}")
    if config_path.exists():
        logger.debug(f"Config loaded from: {config_path}")


@cli.command()
@click.argument('chapter', type=click.Path(exists=True, dir_okay=False))
def fingerprint(chapter: str):
    """Print the content fingerprint of a chapter file."""
    click.echo(content_fingerprint(_read(chapter)))


@cli.command()
@click.argument('critique', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print parsed data as JSON')
def parse(critique: str, as_json: bool):
    """Parse a saved critique into scores, sections and suggestions."""
    data = parse_critique(_read(critique))
    if data is None:
        raise click.ClickException("Critique is empty or could not be parsed")

    if as_json:
        click.echo(data.model_dump_json(indent=2))
    else:
        render_critique(data)


@cli.command()
@click.argument('chapter', type=click.Path(exists=True, dir_okay=False))
@click.option('--chapter-id', required=True, help='Chapter identifier used as cache key')
@click.option('--novel-title', default='', help='Novel title for the prompt')
@click.option('--chapter-title', default=None, help='Chapter title (defaults to file name)')
@click.option('--model', '-m', default=None, help='Model selection, e.g. "DeepSeek R1"')
@click.option('--force', is_flag=True, help='Regenerate even if the cached critique is current')
@click.option('--json', 'as_json', is_flag=True, help='Print the outcome as JSON')
@click.pass_context
def review(ctx: click.Context, chapter: str, chapter_id: str, novel_title: str,
           chapter_title: Optional[str], model: Optional[str], force: bool, as_json: bool):
    """Critique a chapter, reusing the cached critique when unchanged."""
    from .review import ChapterReviewer
    from .providers import ModelRouter

    config = ctx.obj['config']
    logger = ctx.obj['logger']

    cache = open_file_cache(config.cache.cache_dir, config.cache.key_prefix)
    reviewer = ChapterReviewer(ModelRouter(config), cache, config)

    try:
        outcome = reviewer.review(
            chapter_id=chapter_id,
            novel_title=novel_title,
            chapter_title=chapter_title or Path(chapter).stem,
            content=_read(chapter),
            model=model,
            force=force,
        )
    except Exception as e:
        logger.error(f"Review failed: {e}")
        raise click.ClickException(str(e))

    if as_json:
        click.echo(outcome.model_dump_json(indent=2))
        return

    source = "cache" if outcome.from_cache else "model"
    logger.success(f"Critique ready (from {source})")
    if outcome.critique is None or outcome.critique.is_empty:
        console.print(outcome.raw, markup=False)
    else:
        render_critique(outcome.critique)


@cli.command('cache-check')
@click.argument('chapter', type=click.Path(exists=True, dir_okay=False))
@click.option('--chapter-id', required=True, help='Chapter identifier used as cache key')
@click.pass_context
def cache_check(ctx: click.Context, chapter: str, chapter_id: str):
    """Report whether a cached critique exists and if the chapter changed since."""
    config = ctx.obj['config']
    cache = open_file_cache(config.cache.cache_dir, config.cache.key_prefix)
    check = cache.check(chapter_id, _read(chapter))

    if not check.has_cached:
        click.echo("no cached critique")
    elif check.content_changed:
        click.echo("cached critique is stale (chapter changed)")
    else:
        click.echo("cached critique is current")


@cli.command('cache-clear')
@click.option('--chapter-id', required=True, help='Chapter identifier used as cache key')
@click.pass_context
def cache_clear(ctx: click.Context, chapter_id: str):
    """Remove the cached critique for a chapter."""
    config = ctx.obj['config']
    open_file_cache(config.cache.cache_dir, config.cache.key_prefix).clear(chapter_id)
    ctx.obj['logger'].success(f"Cleared cached critique for {chapter_id}")


@cli.command()
@click.argument('original', type=click.Path(exists=True, dir_okay=False))
@click.argument('improved', type=click.Path(exists=True, dir_okay=False))
@click.option('--all', 'show_all', is_flag=True, help='Also list unchanged paragraphs')
def diff(original: str, improved: str, show_all: bool):
    """Compare a chapter with its revised version paragraph by paragraph."""
    paragraphs = analyze_differences(_read(original), _read(improved))

    table = Table(title="段落差異")
    table.add_column("#", justify="right")
    table.add_column("變更")
    table.add_column("相似度", justify="right")
    table.add_column("修改後")
    for p in paragraphs:
        if not show_all and not p.has_changes:
            continue
        style = CHANGE_STYLES[p.change_type]
        table.add_row(
            str(p.index),
            f"[{style}]{p.change_type}[/]",
            f"{p.similarity:.2f}",
            Text(p.improved or p.original),
        )
    console.print(table)

    changed = sum(1 for p in paragraphs if p.has_changes)
    click.echo(f"{changed}/{len(paragraphs)} paragraphs changed")


@cli.command()
@click.argument('original', type=click.Path(exists=True, dir_okay=False))
@click.argument('improved', type=click.Path(exists=True, dir_okay=False))
@click.option('--select', '-s', type=int, multiple=True, help='Paragraph index to take from the revision')
@click.option('--output', '-o', type=click.Path(), help='Write merged text here instead of stdout')
@click.pass_context
def merge(ctx: click.Context, original: str, improved: str, select: tuple, output: Optional[str]):
    """Merge selected revised paragraphs into the original chapter."""
    merged = merge_paragraphs(_read(original), _read(improved), list(select))

    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_text(merged, encoding="utf-8")
        ctx.obj['logger'].success(f"Merged chapter written to {output}")
    else:
        click.echo(merged)


@cli.command()
@click.argument('chapter', type=click.Path(exists=True, dir_okay=False))
@click.argument('quote')
def locate(chapter: str, quote: str):
    """Find where a quoted passage appears in a chapter."""
    content = _read(chapter)
    offsets = locate_quote(content, quote)
    if not offsets:
        raise click.ClickException("Quote not found in chapter")

    for offset in offsets:
        click.echo(f"{offset}: {quote_context(content, offset, len(quote))}")


@cli.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', type=int, default=8000, help='Port')
@click.option('--json-logs', is_flag=True, help='Log JSON lines instead of coloured text')
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, json_logs: bool):
    """Run the HTTP API."""
    if json_logs:
        reset_logger()
        setup_logger(ctx.obj['config'].log_level, serialize=True)

    import uvicorn
    uvicorn.run("muse_writer.api:app", host=host, port=port)


def main():
    cli()


if __name__ == '__main__':
    main()
