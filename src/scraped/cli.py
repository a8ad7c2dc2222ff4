"""
CLI module for scraped.

Provides the command-line interface: scrape a page, optionally follow its
child links, and write the results as JSON.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ScrapeConfig, load_config
from .document import Document
from .errors import KeyNotFound, ScrapedError
from .fetch import Fetcher
from .presets import PRESETS
from .registry import SelectorRegistry
from .results import ResultNode, flatten

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def show_results(result: ResultNode, names: str) -> None:
    """
    Print selected properties/selectors of a result to the console.

    Args:
        result: page results
        names: comma separated property or selector names
    """
    for name in [n.strip() for n in names.split(",") if n.strip()]:
        try:
            value = result.get(name)
        except KeyNotFound:
            logger.warning(f"The property '{name}' was not found")
            print(f"- {name}: not found!")
            continue

        if value is None:
            print(f"- {name}: undefined")
        else:
            print(f"- {name}: {json.dumps(value, default=str)}")


def build_config(
    config_path: Optional[str] = None,
    presets: Optional[List[str]] = None,
    user_agent: Optional[str] = None,
    bearer_tokens: Optional[List[str]] = None,
) -> ScrapeConfig:
    """
    Combine the configuration file (if any) with command line options.

    The `generic` preset is used when nothing else selects anything.
    """
    config = load_config(config_path) if config_path else ScrapeConfig()

    config.presets.extend(presets or [])
    if not (config.presets or config.selectors or config.list_selectors):
        config.presets.append("generic")

    if user_agent:
        config.request.user_agent = user_agent
    config.request.bearer_tokens.extend(bearer_tokens or [])

    return config


async def scrape_page(url: str, registry: SelectorRegistry, fetcher: Fetcher, follow: bool) -> ResultNode:
    """Load a page and build its results, with child pages when `follow` is set."""
    loaded = await Document(url, registry, fetcher).load()
    logger.info(f"Parsed {url}")

    if follow:
        result = await loaded.results_graph()
        logger.info(f"Loaded {len(result.children)} of {len(result.child_urls)} child pages")
        return result
    return loaded.results()


async def run_scraper(
    url: str,
    output: Optional[str] = None,
    follow: bool = False,
    flat: bool = False,
    show: Optional[str] = None,
    config_path: Optional[str] = None,
    presets: Optional[List[str]] = None,
    user_agent: Optional[str] = None,
    bearer_tokens: Optional[List[str]] = None,
    verbose: bool = False,
    fetcher: Optional[Fetcher] = None,
) -> None:
    """
    Main scraper orchestration function.

    Args:
        url: URL of the page to scrape
        output: file where JSON results are saved; printed to stdout when omitted
        follow: follow child links (one level deep)
        flat: write a flat list of pages instead of a tree
        show: comma separated names to print to the console
        config_path: Path to configuration file
        presets: preset names to apply
        user_agent: explicit User-Agent header
        bearer_tokens: bearer tokens ("token" or "host|token")
        verbose: Enable verbose logging
        fetcher: fetcher to use instead of one built from the configuration
    """
    setup_logging(verbose)

    try:
        config = build_config(config_path, presets, user_agent, bearer_tokens)
        registry = config.build_registry()
        if fetcher is None:
            async with config.build_fetcher() as owned_fetcher:
                result = await scrape_page(url, registry, owned_fetcher, follow)
        else:
            result = await scrape_page(url, registry, fetcher, follow)

        if show:
            show_results(result, show)

        if flat:
            payload = [page.to_dict() for page in flatten(result)]
        else:
            payload = result.to_dict()
        text = json.dumps(payload, indent=2, default=str)

        if output:
            Path(output).parent.mkdir(parents=True, exist_ok=True)
            Path(output).write_text(text, encoding="utf-8")
            logger.info(f"Saved results to {output}")
        elif not show:
            print(text)

    except (ScrapedError, OSError, ValueError) as e:
        logger.error(f"Scraping failed: {e}")
        sys.exit(1)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Scrape structured data from HTML pages with CSS selectors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scraped run https://docs.rs/serde --preset docs-rs --follow -o serde.json
  scraped run https://example.com --show title,h1
  scraped run https://example.com --config selectors.json --follow --flatten
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser('run', help='Scrape a page')
    run_parser.add_argument('url', help='The URL to inspect')
    run_parser.add_argument('--output', '-o',
                            help='File where JSON results will be saved')
    run_parser.add_argument('--follow', '-f', action='store_true',
                            help='Follow the document into child links')
    run_parser.add_argument('--flatten', action='store_true',
                            help='Flatten results to a JSON array of pages')
    run_parser.add_argument('--show', '-s',
                            help='Comma separated selectors/properties to show on the console')
    run_parser.add_argument('--config', '-c',
                            help='JSON configuration file with selectors and request settings')
    run_parser.add_argument('--preset', '-p', action='append', choices=sorted(PRESETS),
                            help='Add a preset bundle of selectors (repeatable)')
    run_parser.add_argument('--user-agent',
                            help='User-Agent header sent with every request')
    run_parser.add_argument('--bearer-token', action='append',
                            help='Bearer token, optionally scoped as "host|token" (repeatable)')
    run_parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable verbose logging')

    args = parser.parse_args()

    if args.command == 'run':
        asyncio.run(run_scraper(
            url=args.url,
            output=args.output,
            follow=args.follow,
            flat=args.flatten,
            show=args.show,
            config_path=args.config,
            presets=args.preset,
            user_agent=args.user_agent,
            bearer_tokens=args.bearer_token,
            verbose=args.verbose,
        ))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
