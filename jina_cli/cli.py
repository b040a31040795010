"""Command-line interface for jina_cli."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .batch import load_url_list, read_batch
from .config import SENSITIVE_KEYS, ConfigStore, mask_sensitive, normalize_key
from .errors import ConfigError, JinaError, UsageError
from .formatters import BaseFormatter, MarkdownFormatter, get_formatter
from .http.client import JinaClient
from .logging_config import level_for, setup_logging
from .models.api import ReadRequest, SearchRequest
from .models.config import Settings
from .models.envelope import Envelope, Failure, Success

logger = logging.getLogger(__name__)

RESPONSE_FORMATS = ["markdown", "html", "text", "screenshot"]
OUTPUT_FORMATS = ["json", "markdown"]


def _add_global_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("global options")
    group.add_argument(
        "--api-base",
        "-a",
        type=str,
        metavar="URL",
        help="API base URL (overrides config)",
    )
    group.add_argument(
        "--api-key",
        "-k",
        type=str,
        metavar="KEY",
        help="API key (overrides config)",
    )
    group.add_argument(
        "--output",
        "-o",
        choices=OUTPUT_FORMATS,
        help="Output format (default: json)",
    )
    group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    group.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Also write log records to this file",
    )


def _global_parent() -> argparse.ArgumentParser:
    """Global options again, for use after the command name.

    Defaults are suppressed so that a subcommand never overwrites a value
    given before the command name.
    """
    parent = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    _add_global_arguments(parent)
    return parent


def _add_read_parser(subparsers: Any, parent: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser(
        "read",
        aliases=["r"],
        parents=[parent],
        help="Extract and convert content from URLs",
        description="Read any URL and convert it to LLM-friendly Markdown, HTML, or text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jina read --url "https://example.com"
  jina read -u "https://x.com/user/status/123" --with-alt
  jina read --file urls.txt --output markdown
        """,
    )
    parser.set_defaults(handler=run_read)

    source_group = parser.add_argument_group("source")
    source_group.add_argument("--url", "-u", type=str, help="URL to read (required if --file not used)")
    source_group.add_argument("--file", "-f", type=Path, metavar="PATH", help="File containing URLs (one per line)")

    request_group = parser.add_argument_group("request options")
    request_group.add_argument(
        "--format",
        "-F",
        choices=RESPONSE_FORMATS,
        dest="response_format",
        help="Response format (default: markdown)",
    )
    request_group.add_argument("--timeout", "-t", type=int, default=0, help="Request timeout in seconds")
    request_group.add_argument("--with-alt", action="store_true", help="Enable image captioning with a VLM")
    request_group.add_argument("--no-cache", action="store_true", help="Bypass cache")
    request_group.add_argument("--proxy", type=str, metavar="URL", help="Proxy server URL")
    request_group.add_argument("--target-selector", type=str, metavar="CSS", help="CSS selector for content extraction")
    request_group.add_argument("--wait-for-selector", type=str, metavar="CSS", help="CSS selector to wait for")
    request_group.add_argument("--cookie", type=str, help="Cookie string to forward")
    request_group.add_argument("--post", action="store_true", help="Use POST method (for SPA with hash routing)")
    request_group.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Extra request header (repeatable)",
    )

    parser.add_argument(
        "--output-file",
        "-O",
        type=Path,
        metavar="PATH",
        help="Write output to file instead of stdout (markdown only)",
    )


def _add_search_parser(subparsers: Any, parent: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser(
        "search",
        aliases=["s"],
        parents=[parent],
        help="Search the web with AI-powered results",
        description="Search the web and return results in LLM-friendly format.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jina search --query "golang latest news"
  jina search -q "AI developments" --site techcrunch.com --site theverge.com
  jina search -q "climate change" --limit 10 --output markdown
        """,
    )
    parser.set_defaults(handler=run_search)

    parser.add_argument("--query", "-q", type=str, help="Search query (required)")
    parser.add_argument(
        "--site",
        "-s",
        action="append",
        default=[],
        metavar="DOMAIN",
        help="Restrict to specific domains (repeatable or comma separated)",
    )
    parser.add_argument(
        "--format",
        "-F",
        choices=RESPONSE_FORMATS,
        dest="response_format",
        help="Response format (default: markdown)",
    )
    parser.add_argument("--timeout", "-t", type=int, default=0, help="Request timeout in seconds")
    parser.add_argument("--limit", "-l", type=int, default=0, help="Max results to return (default: 5)")
    parser.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Extra request header (repeatable)",
    )
    parser.add_argument(
        "--output-file",
        "-O",
        type=Path,
        metavar="PATH",
        help="Write output to file instead of stdout (markdown only)",
    )


def _add_config_parser(subparsers: Any, parent: argparse.ArgumentParser) -> None:
    parser = subparsers.add_parser(
        "config",
        parents=[parent],
        help="Manage configuration",
        description="Manage the configuration file (~/.jina-reader/config.yaml).",
    )
    config_subparsers = parser.add_subparsers(dest="config_command", metavar="ACTION")

    set_parser = config_subparsers.add_parser("set", parents=[parent], help="Set a configuration value")
    set_parser.add_argument("key")
    set_parser.add_argument("value")
    set_parser.set_defaults(handler=run_config_set)

    get_parser = config_subparsers.add_parser("get", parents=[parent], help="Get a configuration value")
    get_parser.add_argument("key")
    get_parser.set_defaults(handler=run_config_get)

    list_parser = config_subparsers.add_parser("list", parents=[parent], help="List all configuration")
    list_parser.set_defaults(handler=run_config_list)

    path_parser = config_subparsers.add_parser("path", parents=[parent], help="Show config file path")
    path_parser.set_defaults(handler=run_config_path)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="jina",
        description="Convert any URL to LLM-friendly input and search the web from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Quick start:
  jina read --url "https://example.com"
  jina search --query "golang latest news"

Get help:
  jina --help
  jina [command] --help
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    _add_global_arguments(parser)

    parent = _global_parent()
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    _add_read_parser(subparsers, parent)
    _add_search_parser(subparsers, parent)
    _add_config_parser(subparsers, parent)

    return parser


def parse_headers(values: list[str]) -> dict[str, str]:
    """Parse ``NAME: VALUE`` strings into a header map."""
    headers = {}
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise UsageError(f"Invalid header {value!r}, expected 'NAME: VALUE'")
        headers[name.strip()] = header_value.strip()
    return headers


def parse_sites(values: list[str]) -> list[str]:
    """Flatten repeated and comma separated ``--site`` values."""
    sites = []
    for value in values:
        sites.extend(site.strip() for site in value.split(",") if site.strip())
    return sites


def _load_settings(store: ConfigStore) -> Settings:
    settings = store.load()
    logger.debug(f"Loaded settings from {store.path}")
    return settings


def _run_with_formatter(args: argparse.Namespace, settings: Settings, execute: Any) -> int:
    """Open the formatter, run ``execute(formatter)`` and render its envelope.

    The formatter (and any output file) is closed on every path.
    """
    output_format = args.output or settings.default_output_format
    try:
        with get_formatter(output_format, output_file=args.output_file) as formatter:
            envelope = execute(formatter)
            return formatter.render(envelope).exit_code
    except OSError as e:
        logger.debug("Output error", exc_info=True)
        return get_formatter("json").render_error(e).exit_code


def _build_read_request(args: argparse.Namespace, settings: Settings) -> ReadRequest:
    return ReadRequest(
        url=args.url or "",
        post=args.post,
        response_format=args.response_format or settings.default_response_format,
        headers=parse_headers(args.header),
        no_cache=args.no_cache,
        proxy_url=args.proxy or settings.proxy_url,
        target_selector=args.target_selector,
        wait_for_selector=args.wait_for_selector,
        cookie=args.cookie,
        with_generated_alt=args.with_alt or settings.with_generated_alt,
        cache_tolerance=settings.cache_tolerance,
    )


def _read_urls(path: Path) -> list[str]:
    urls = load_url_list(path)
    if not urls:
        raise UsageError(f"No URLs found in {path}")
    return urls


def _read_batch_with_progress(
    client: JinaClient, urls: list[str], template: ReadRequest, show_progress: bool
) -> list[dict[str, Any]]:
    if not show_progress:
        return read_batch(client, urls, template)

    console = Console(stderr=True)
    console.print(f"Processing {len(urls)} URLs...")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting...", total=None)

        def on_progress(index: int, total: int, url: str) -> None:
            progress.update(task, description=f"[cyan]Reading {index}/{total}: {url}")

        return read_batch(client, urls, template, on_progress=on_progress)


def _render_early_error(args: argparse.Namespace, settings: Settings, error: Exception) -> int:
    """Report an error found before the output file is opened, so it is left untouched."""
    logger.debug("Invalid arguments", exc_info=True)
    return get_formatter(args.output or settings.default_output_format).render_error(error).exit_code


def run_read(args: argparse.Namespace) -> int:
    """Run the read command."""
    store = ConfigStore()
    try:
        settings = _load_settings(store)
    except ConfigError as e:
        return get_formatter(args.output).render_error(e).exit_code

    urls: list[str] = []
    try:
        if not args.url and not args.file:
            raise UsageError("Either --url or --file is required")
        if args.url and args.file:
            raise UsageError("--url and --file cannot be used together")
        template = _build_read_request(args, settings)
        if args.file:
            urls = _read_urls(args.file)
    except (UsageError, OSError) as e:
        return _render_early_error(args, settings, e)

    def execute(formatter: BaseFormatter) -> Envelope:
        try:
            with JinaClient.from_settings(
                settings,
                read_api_url=args.api_base,
                api_key=args.api_key,
                timeout=args.timeout if args.timeout > 0 else None,
            ) as client:
                if args.url:
                    return Success(client.read(template).to_dict())

                show_progress = isinstance(formatter, MarkdownFormatter)
                return Success(_read_batch_with_progress(client, urls, template, show_progress))
        except JinaError as e:
            logger.debug("Read failed", exc_info=True)
            return Failure.from_exception(e)

    return _run_with_formatter(args, settings, execute)


def run_search(args: argparse.Namespace) -> int:
    """Run the search command."""
    store = ConfigStore()
    try:
        settings = _load_settings(store)
    except ConfigError as e:
        return get_formatter(args.output).render_error(e).exit_code

    try:
        if not args.query:
            raise UsageError("--query is required")
        request = SearchRequest(
            query=args.query,
            sites=parse_sites(args.site),
            response_format=args.response_format or settings.default_response_format,
            headers=parse_headers(args.header),
            limit=args.limit,
        )
    except UsageError as e:
        return _render_early_error(args, settings, e)

    def execute(formatter: BaseFormatter) -> Envelope:
        try:
            with JinaClient.from_settings(
                settings,
                search_api_url=args.api_base,
                api_key=args.api_key,
                timeout=args.timeout if args.timeout > 0 else None,
            ) as client:
                response = client.search(request)
        except JinaError as e:
            logger.debug("Search failed", exc_info=True)
            return Failure.from_exception(e)

        if isinstance(formatter, MarkdownFormatter):
            return Success([result.to_dict() for result in response.results])
        return Success(response.to_dict())

    return _run_with_formatter(args, settings, execute)


def run_config_set(args: argparse.Namespace) -> int:
    """Persist one configuration value."""
    formatter = get_formatter("json")
    store = ConfigStore()
    try:
        store.set(args.key, args.value)
    except ConfigError as e:
        return formatter.render_error(e).exit_code

    shown = mask_sensitive(args.value) if normalize_key(args.key) in SENSITIVE_KEYS else args.value
    return formatter.render(Success({"key": args.key, "value": shown})).exit_code


def run_config_get(args: argparse.Namespace) -> int:
    """Print one resolved configuration value."""
    store = ConfigStore()
    try:
        value = store.get(args.key)
    except ConfigError as e:
        return get_formatter("json").render_error(e).exit_code

    print(value if value else "(not set)")
    return 0


def run_config_list(args: argparse.Namespace) -> int:
    """Print every resolved configuration value."""
    store = ConfigStore()
    try:
        values = store.list()
    except ConfigError as e:
        return get_formatter("json").render_error(e).exit_code

    if args.output == "json":
        return get_formatter("json").render(Success({"path": str(store.path), "values": values})).exit_code

    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in values.items():
        table.add_row(key, value)

    console = Console()
    console.print(table)
    console.print(f"Config file: {store.path}")
    return 0


def run_config_path(args: argparse.Namespace) -> int:
    """Report the configuration file path and whether it exists."""
    store = ConfigStore()
    data = {"path": str(store.path), "exists": store.path.exists()}
    return get_formatter("json").render(Success(data)).exit_code


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=level_for(args.verbose),
        log_file=str(args.log_file) if args.log_file else None,
        force=True,
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
