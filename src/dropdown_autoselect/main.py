"""
Dropdown Auto-Select - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--target, --retries, etc.)
    2. Environment variables (DROPDOWN_AUTOSELECT__SELECTION__TARGET_CONTROL, etc.)
    3. Config file (dropdown-autoselect.yaml / config.yaml)

Usage:
    dropdown-autoselect run https://example.com/report --target region
    dropdown-autoselect script --target region --output select-region.js
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from dropdown_autoselect import __version__
from dropdown_autoselect.browsers.playwright_browser import PlaywrightBrowser
from dropdown_autoselect.config import get_settings
from dropdown_autoselect.engine.engine import SelectionRun
from dropdown_autoselect.engine.models import RunResult, SelectionConfig
from dropdown_autoselect.engine.sink import LoggingSink
from dropdown_autoselect.exceptions import DropdownAutoSelectError, NotConfiguredError
from dropdown_autoselect.generator.script_generator import StandaloneScriptGenerator
from dropdown_autoselect.utils.logging import setup_logging

app = typer.Typer(
    name="dropdown-autoselect",
    help="Select the first meaningful option of a dropdown in any web page",
    add_completion=False,
)

console = Console()


def _build_config(
    target: Optional[str],
    retries: Optional[int],
    delay: Optional[int],
    timeout: Optional[int],
) -> SelectionConfig:
    """Merge CLI overrides over settings, exiting when no target is set."""
    settings = get_settings()
    try:
        return settings.selection.to_config(
            target_control=target,
            max_retries=retries,
            retry_delay_ms=delay,
            observer_timeout_ms=timeout,
        )
    except NotConfiguredError:
        console.print("[red]Error: No target control configured.[/red]")
        console.print("Set via CLI: --target region")
        console.print("Or env var: DROPDOWN_AUTOSELECT__SELECTION__TARGET_CONTROL=region")
        raise typer.Exit(1)


@app.command()
def run(
    url: str = typer.Argument(..., help="URL of the page holding the dropdown"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Control identifier (default: from config)"),
    retries: Optional[int] = typer.Option(None, "--retries", "-r", min=0, help="Retries before observing"),
    delay: Optional[int] = typer.Option(None, "--delay", min=0, help="Delay between retries (ms)"),
    timeout: Optional[int] = typer.Option(None, "--timeout", min=0, help="Observer timeout (ms)"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    browser: Optional[str] = typer.Option(None, "--browser", "-b", help="Browser: chromium, firefox, webkit"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Open a page and auto-select the first option of the target dropdown.

    Exits with status 1 when the run times out.

    Examples:
        dropdown-autoselect run https://example.com --target region
        dropdown-autoselect run https://example.com -t "Sales filter" --visible
    """
    settings = get_settings()
    setup_logging(
        "DEBUG" if verbose else settings.logging.level,
        log_file=settings.logging.file,
        json_format=settings.logging.json_format,
    )
    config = _build_config(target, retries, delay, timeout)
    browser_type = browser or settings.browser.browser_type

    console.print(Panel.fit(
        f"[bold blue]Dropdown Auto-Select[/bold blue]\n"
        f"[dim]Page:[/dim] {url}\n"
        f"[dim]Target control:[/dim] {config.target_control_id}\n"
        f"[dim]Retries:[/dim] {config.max_retries} x {config.retry_delay_ms} ms, "
        f"then observe {config.observer_timeout_ms} ms",
        border_style="blue",
    ))

    try:
        result = asyncio.run(_run_async(
            url=url,
            config=config,
            headless=settings.browser.headless and not visible,
            browser_type=browser_type,
            navigation_timeout_ms=settings.browser.timeout_ms,
            slow_mo=settings.browser.slow_mo,
        ))
    except DropdownAutoSelectError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if result.succeeded:
        label = result.selected_label
        if label is None:
            console.print("[green]✓ Custom widget opened[/green] [dim](option result logged)[/dim]")
        else:
            console.print(f"[green]✓ Selected[/green] [bold]{label}[/bold] after {result.attempts} attempt(s)")
        return

    console.print(f"[red]✗ {result.error}[/red]")
    raise typer.Exit(1)


async def _run_async(
    url: str,
    config: SelectionConfig,
    headless: bool,
    browser_type: str,
    navigation_timeout_ms: int,
    slow_mo: int = 0,
) -> RunResult:
    """Launch a browser, open the page and run the engine once."""
    browser = PlaywrightBrowser()
    await browser.launch(headless=headless, browser_type=browser_type, slow_mo=slow_mo)
    try:
        document = await browser.new_document()
        await document.goto(url, timeout=navigation_timeout_ms)
        return await SelectionRun(config, document, sink=LoggingSink()).run()
    finally:
        await browser.close()


@app.command()
def script(
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Control identifier (default: from config)"),
    retries: Optional[int] = typer.Option(None, "--retries", "-r", min=0, help="Retries before observing"),
    delay: Optional[int] = typer.Option(None, "--delay", min=0, help="Delay between retries (ms)"),
    timeout: Optional[int] = typer.Option(None, "--timeout", min=0, help="Observer timeout (ms)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
    bookmarklet: bool = typer.Option(False, "--bookmarklet", help="Emit a javascript: URL"),
):
    """
    Generate a standalone script that runs the auto-selection in a browser.
    """
    config = _build_config(target, retries, delay, timeout)
    generator = StandaloneScriptGenerator()
    text = generator.as_bookmarklet(config) if bookmarklet else generator.generate(config)

    if output is None:
        typer.echo(text.rstrip("\n"))
        return

    output.write_text(text, encoding="utf-8")
    console.print(f"[green]✓ Script written to[/green] {output}")


@app.command()
def version():
    """Show version information."""
    console.print(f"dropdown-autoselect {__version__}")


if __name__ == "__main__":
    app()
