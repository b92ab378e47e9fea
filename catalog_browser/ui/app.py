"""Interactive terminal front-end for the catalog browser."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from catalog_browser.services.browser import CatalogBrowser
from catalog_browser.ui.renderer import render


logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  n | next            next page          p | prev        previous page
  size N              rows per page      search TEXT     filter by name (empty clears)
  sort name|type      sort / toggle      open N|NAME     show type and image for a row
  more                load more items    h | help        this help
  q | quit            exit"""

_ALIASES = {
    "n": "next",
    "p": "prev",
    "h": "help",
    "?": "help",
    "q": "quit",
    "exit": "quit",
    "o": "open",
    "s": "search",
    "m": "more",
}


@dataclass(frozen=True)
class Command:
    verb: str
    arg: str = ""


def parse_command(line: str) -> Command:
    """Split ``line`` into a verb and the remainder, resolving aliases."""
    text = (line or "").strip()
    if not text:
        return Command("noop")
    verb, _, arg = text.partition(" ")
    verb = verb.lower()
    return Command(_ALIASES.get(verb, verb), arg.strip())


class BrowserApp:
    """Read-eval-render loop around a ``CatalogBrowser``."""

    def __init__(self, browser: CatalogBrowser, console: Console | None = None) -> None:
        self.browser = browser
        self.console = console or Console()

    def _resolve_row(self, arg: str) -> tuple[str, str] | None:
        page = self.browser.view()
        if arg.isdigit():
            idx = int(arg) - 1
            if 0 <= idx < len(page.rows):
                item = page.rows[idx].item
                return item.name, item.url
            return None
        for item in self.browser.state.catalog.items:
            if item.name.lower() == arg.lower():
                return item.name, item.url
        return None

    async def handle(self, command: Command) -> bool:
        """Apply one command. Returns False when the app should exit."""
        verb, arg = command.verb, command.arg

        if verb == "quit":
            return False
        if verb == "noop":
            return True
        if verb == "help":
            self.console.print(HELP_TEXT)
            return True

        try:
            if verb in ("next", "prev"):
                self.browser.on_page_change(verb)
            elif verb == "size":
                self.browser.on_page_size_change(arg)
            elif verb == "search":
                self.browser.on_search_change(arg)
            elif verb == "sort":
                self.browser.on_sort_change(arg or "name")
            elif verb == "more":
                await self.browser.on_scroll_near_bottom()
            elif verb == "open":
                target = self._resolve_row(arg)
                if target is None:
                    self.console.print(f"[red]No row matches {escape(repr(arg))}[/red]")
                else:
                    await self.browser.on_row_click(*target)
            else:
                self.console.print(f"[red]Unknown command {escape(repr(verb))}[/red] (h for help)")
        except ValueError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
        return True

    def show(self) -> None:
        self.console.print(render(self.browser.state))

    async def run(self) -> None:
        await self.browser.on_mount()
        self.console.print(HELP_TEXT)
        self.show()
        try:
            while True:
                line = await asyncio.to_thread(self.console.input, "[bold]> [/bold]")
                if not await self.handle(parse_command(line)):
                    break
                self.show()
        except (EOFError, KeyboardInterrupt):
            logger.debug("Input closed, leaving browser")
        finally:
            await self.browser.aclose()
