import json
import logging
import sys
from pathlib import Path

import click

from .chordpro import ChordProFormatter
from .engine import TabEngine
from .exceptions import ConfigError, FetchError
from .fetch import DEFAULT_TIMEOUT
from .registry import DEFAULT_REGISTRY, SiteRegistry


@click.command()
@click.argument("url")
@click.option("--html-file", "html_file", default=None, metavar="PATH",
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Parse a saved page instead of fetching URL.")
@click.option("--format", "output_format", type=click.Choice(["chordpro", "json"]),
              default="chordpro", show_default=True, help="Output format.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Write to PATH instead of stdout.")
@click.option("--sites", "sites_path", default=None, metavar="PATH", envvar="TABGATHER_SITES",
              help="YAML file overriding the built-in site table.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, show_default=True, type=float,
              help="HTTP timeout in seconds.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log extraction details to stderr.")
def main(
    url: str,
    html_file: Path | None,
    output_format: str,
    output_path: str | None,
    sites_path: str | None,
    timeout: float,
    verbose: bool,
) -> None:
    """Extract a guitar tab or chord sheet from URL.

    \b
    Parsed sites:
      - j-total.net, gakufu.gakki.me, guitartabs.cc
      - ufret.jp, chordwiki.jpn.org (saved pages work best)
    Link-only sites:
      - ultimate-guitar.com, songsterr.com, chordify.net
    Any other site gets the generic <pre>/<code> extractor.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # --- Site table ---
    registry = DEFAULT_REGISTRY
    if sites_path:
        try:
            registry = SiteRegistry.from_yaml(sites_path)
        except ConfigError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
    engine = TabEngine(registry)

    # --- Fetch + parse ---
    if html_file is not None:
        result = engine.parse(html_file.read_text(encoding="utf-8", errors="replace"), url)
    else:
        try:
            result = engine.scrape(url, timeout=timeout)
        except FetchError as exc:
            msg = f"Error: Could not fetch {exc.url}"
            if exc.status_code:
                msg += f" (HTTP {exc.status_code})"
            elif exc.reason:
                msg += f" ({exc.reason})"
            click.echo(msg, err=True)
            sys.exit(1)

    if result.redirect_only:
        click.echo(result.message)
        click.echo(url)
        return

    if not result.content:
        click.echo(f"Warning: no tab content found on {url}", err=True)
    elif not result.validation.valid:
        click.echo(
            f"Warning: extracted text does not look like a full tab "
            f"({result.validation.lines} lines, chord ratio {result.validation.chord_ratio:.2f})",
            err=True,
        )

    # --- Render ---
    if output_format == "json":
        text = json.dumps(result.to_dict(), ensure_ascii=False, indent=2) + "\n"
    else:
        text = ChordProFormatter().render(result)

    # --- Output ---
    if output_path is None:
        click.echo(text, nl=False)
        return
    Path(output_path).write_text(text, encoding="utf-8")
    click.echo(f"Written to {output_path}")
