"""CLI entry point: the `cookie-scout` command."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from cookie_scout.core.analyzer import analyze
from cookie_scout.core.base import AnalysisResult, ClassifiedCookie, CookieCategory
from cookie_scout.core.config import Settings, load_settings
from cookie_scout.core.domains import describe_domain, is_first_party_cookie
from cookie_scout.core.exceptions import ConfigError, CookieScoutError, FetchError
from cookie_scout.core.fetch import fetch_snapshot, normalize_url
from cookie_scout.core.report import COOKIE_PURPOSE, build_report, privacy_impact, shorten
from cookie_scout.core.scoring import get_rating_color
from cookie_scout.core.signatures import load_signature_database

console = Console()
err_console = Console(stderr=True)

CATEGORY_COLORS = {
    CookieCategory.ESSENTIAL: "green",
    CookieCategory.ANALYTICS: "yellow",
    CookieCategory.MARKETING: "red",
    CookieCategory.SOCIAL: "blue",
    CookieCategory.UNKNOWN: "white",
}

# Keyed by TrackerSignature.label
TRACKER_PREFIXES = {
    "Analytics": ("[ANALYTICS]", "yellow"),
    "Marketing": ("[MARKETING]", "red"),
    "Social": ("[SOCIAL]", "blue"),
    "Security": ("[SECURITY]", "white"),
    "CDN/Security": ("[CDN]", "white"),
    "Error Tracking": ("[ERROR]", "white"),
    "Customer Support": ("[SUPPORT]", "white"),
    "A/B Testing": ("[A/B TEST]", "white"),
    "Marketing/CRM": ("[CRM]", "red"),
}

DOMAIN_DISPLAY_LIMIT = 15
SCORE_BAR_WIDTH = 40
DIVIDER = "━" * 80


def _run_async(coro: Any) -> Any:
    """Run an async coroutine from the sync Click command."""
    return asyncio.run(coro)


def _configure_logging(debug: bool) -> None:
    logger = logging.getLogger("cookie_scout")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))


def _divider() -> None:
    console.print(f"[bright_black]{DIVIDER}[/bright_black]")


def _section(title: str) -> None:
    console.print()
    console.print(f"  [bold bright_white]{title}[/bold bright_white]")
    _divider()


def _render_header(url: str) -> None:
    console.print(
        Panel(
            "[bold]Cookie Scout[/bold]\n[bright_yellow]Website Cookie & Tracker Analyzer[/bright_yellow]",
            style="blue",
        )
    )
    console.print(f"  [bright_green]Analyzing:[/bright_green] [bright_cyan]{escape(url)}[/bright_cyan]\n")


def _render_score(result: AnalysisResult) -> None:
    color = get_rating_color(result.score)
    filled = result.score * SCORE_BAR_WIDTH // 100
    bar = "█" * filled + "░" * (SCORE_BAR_WIDTH - filled)
    console.print(
        Panel(
            f"PRIVACY SCORE: [bold]{result.score}/100[/bold] - "
            f"[{color}]{result.rating.value.upper()}[/{color}]\n"
            f"[{color}]{bar}[/{color}]",
            subtitle="Higher is better",
        )
    )


def _render_cookie(classified: ClassifiedCookie, first_party: str, verbose: bool) -> None:
    cookie = classified.cookie
    console.print(f"  │   • [bright_white]{escape(cookie.name or '(unnamed)')}[/bright_white]")
    if not verbose:
        return

    if cookie.domain:
        console.print(f"  │       [bright_black]Domain:[/bright_black] [cyan]{escape(cookie.domain)}[/cyan]")
    party = "First-party" if is_first_party_cookie(cookie, first_party) else "Third-party"
    console.print(f"  │       [bright_black]Party:[/bright_black] {party}")
    secure = "[green]Yes[/green]" if cookie.secure else "[red]No[/red]"
    console.print(f"  │       [bright_black]Secure:[/bright_black] {secure}")
    http_only = "[green]Yes[/green]" if cookie.http_only else "[yellow]No[/yellow]"
    console.print(f"  │       [bright_black]HttpOnly:[/bright_black] {http_only}")

    same_site = cookie.same_site or "not set"
    same_site_style = {"strict": "green", "lax": "yellow", "none": "red"}.get(
        same_site.lower(), "bright_black"
    )
    console.print(
        f"  │       [bright_black]SameSite:[/bright_black] "
        f"[{same_site_style}]{escape(same_site)}[/{same_site_style}]"
    )
    console.print(
        f"  │       [bright_black]Purpose:[/bright_black] "
        f"[bright_black]{COOKIE_PURPOSE[classified.category]}[/bright_black]"
    )
    console.print("  │")


def _render_cookies(result: AnalysisResult, verbose: bool) -> None:
    _section("COOKIES DETECTED")
    if not result.cookies:
        console.print("  [green][OK][/green] No cookies detected on initial page load")
        return

    for category, cookies in result.cookies_by_category().items():
        if not cookies:
            continue
        color = CATEGORY_COLORS[category]
        console.print(
            f"  ├─ [{color}]{category.value}[/{color}] "
            f"[bright_black]({len(cookies)} cookies)[/bright_black]"
        )
        for classified in cookies:
            _render_cookie(classified, result.domains.first_party, verbose)


def _render_trackers(result: AnalysisResult, verbose: bool) -> None:
    _section("TRACKERS DETECTED")
    if not result.tracker_matches:
        console.print("  [green][OK][/green] No known trackers detected")
        return

    if verbose:
        for match in result.tracker_matches:
            sig = match.signature
            prefix, color = TRACKER_PREFIXES.get(sig.label, ("[OTHER]", "white"))
            console.print(
                f"  [{color}]{prefix}[/{color}] "
                f"[bright_white]{escape(sig.pattern)}[/bright_white] ({escape(sig.vendor)})"
            )
            console.print(
                f"       [bright_black]Description:[/bright_black] "
                f"[cyan]{escape(sig.description)}[/cyan]"
            )
            console.print(
                f"       [bright_black]Found in:[/bright_black] {escape(shorten(match.resource))}"
            )
            console.print(
                f"       [bright_black]Privacy Impact: {privacy_impact(sig)}[/bright_black]"
            )
            console.print()
        return

    # Compact view: one line per distinct signature
    for sig in result.signatures:
        prefix, color = TRACKER_PREFIXES.get(sig.label, ("[OTHER]", "white"))
        console.print(
            f"  [{color}]{prefix}[/{color}] [bright_white]{escape(sig.pattern)}[/bright_white] - "
            f"[bright_black]{escape(sig.description)}[/bright_black]"
        )


def _render_domains(result: AnalysisResult, verbose: bool) -> None:
    _section("THIRD-PARTY DOMAINS")
    domains = result.domains.third_party
    if not domains:
        console.print("  [green][OK][/green] No third-party domains detected")
        return

    shown = domains if verbose else domains[:DOMAIN_DISPLAY_LIMIT]
    for i, domain in enumerate(shown, 1):
        console.print(f"  {i}. [bright_cyan]{escape(domain)}[/bright_cyan]")
        if verbose:
            kind, description = describe_domain(domain)
            console.print(
                f"      [bright_black]Type:[/bright_black] [yellow]{kind}[/yellow] - "
                f"[bright_black]{description}[/bright_black]"
            )
    if len(domains) > len(shown):
        console.print(f"  ... and [bright_yellow]{len(domains) - len(shown)}[/bright_yellow] more")


def _render_result(result: AnalysisResult, verbose: bool) -> None:
    console.print()
    _divider()
    console.print(
        f"  [bright_blue]Analysis Complete:[/bright_blue] [bold bright_white]{escape(result.url)}[/bold bright_white]"
    )
    _divider()
    console.print(
        f"\n  [bright_yellow]Cookies:[/bright_yellow] {len(result.cookies)}   "
        f"[bright_red]Trackers:[/bright_red] {len(result.signatures)}   "
        f"[bright_blue]3rd Party:[/bright_blue] {result.third_party_count}\n"
    )
    _render_score(result)
    _render_cookies(result, verbose)
    _render_trackers(result, verbose)
    _render_domains(result, verbose)

    console.print()
    _divider()
    if verbose:
        console.print(
            "  [bright_green]Verbose mode:[/bright_green] "
            "[bright_black]Showing detailed information for all items[/bright_black]"
        )
    else:
        console.print(
            "  [bright_yellow]Tip:[/bright_yellow] "
            "[bright_black]Use -v for detailed cookie, tracker, and domain information[/bright_black]"
        )
    _divider()


def _analyze_url(url: str, settings: Settings) -> AnalysisResult:
    database = load_signature_database(settings.signatures)
    snapshot = _run_async(
        fetch_snapshot(url, timeout=settings.timeout, user_agent=settings.user_agent)
    )
    return analyze(snapshot, database=database, weights=settings.weights)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(None, "-V", "--version", package_name="cookie-scout")
@click.argument("url")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed information about each cookie.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["rich", "json"]),
    default="rich",
    help="Output format.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Request timeout in seconds.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a TOML config file.",
)
@click.option("--debug", is_flag=True, help="Log analysis steps to stderr.")
def cli(
    url: str,
    verbose: bool,
    output_format: str,
    timeout: float | None,
    config_path: Path | None,
    debug: bool,
) -> None:
    """Analyze the cookies, trackers and third-party domains a website uses."""
    _configure_logging(debug)

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(2)
    if timeout is not None:
        settings = settings.model_copy(update={"timeout": timeout})

    url = normalize_url(url)

    try:
        if output_format == "json":
            result = _analyze_url(url, settings)
        else:
            _render_header(url)
            with console.status("Fetching page content...", spinner="dots"):
                result = _analyze_url(url, settings)
    except FetchError as e:
        err_console.print(f"\n  [bright_red][ERROR][/bright_red] [red]{escape(str(e))}[/red]")
        err_console.print("  [bright_yellow]Tip:[/bright_yellow] Make sure the URL is correct and accessible\n")
        sys.exit(1)
    except CookieScoutError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(build_report(result), indent=2))
    else:
        _render_result(result, verbose)


if __name__ == "__main__":
    cli()
