"""Render browser state as rich renderables for the terminal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Group
from rich.table import Table
from rich.text import Text

from catalog_browser.core.view_state import SortColumn


if TYPE_CHECKING:
    from catalog_browser.core.composer import ComposedPage, Row
    from catalog_browser.core.state_machine import BrowserState
    from catalog_browser.core.view_state import ViewState


def header_label(title: str, column: SortColumn, view: ViewState) -> str:
    """Column title with the sort arrow when it is the active column."""
    if view.sort_column is column:
        return f"{title} {view.sort_direction.arrow}"
    return title


def format_row(row: Row, *, show_details: bool) -> list[str]:
    cells = [row.name]
    if show_details:
        if row.detail is None:
            cells.extend(["", ""])
        else:
            cells.extend([row.detail.type_summary, row.detail.image_url or "-"])
    return cells


def build_table(state: BrowserState, page: ComposedPage | None = None) -> Table:
    page = page or state.compose()
    show_details = state.has_details

    table = Table(show_header=True, header_style="bold", row_styles=["on grey93", ""], expand=True)
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column(header_label("Name", SortColumn.NAME, state.view), justify="left")
    if show_details:
        table.add_column(header_label("Type", SortColumn.TYPE, state.view), justify="center")
        table.add_column("Image", justify="center", overflow="fold")

    for idx, row in enumerate(page.rows, start=1):
        table.add_row(str(idx), *format_row(row, show_details=show_details))
    return table


def build_status(state: BrowserState, page: ComposedPage | None = None) -> Text:
    page = page or state.compose()
    total_pages = max(1, page.page_count)
    parts = [
        f"Page {page.page_index + 1}/{total_pages}",
        f"{state.view.page_size} rows",
        f"{page.total_filtered_count} matching of {len(state.catalog)} loaded",
    ]
    if state.view.search_term:
        parts.append(f"search={state.view.search_term!r}")
    if state.has_more:
        parts.append("more available")

    status = Text(" | ".join(parts), style="dim")
    if state.loading:
        status.append("  Loading...", style="bold yellow")
    return status


def render(state: BrowserState) -> Group:
    """Table plus status line for the current state."""
    page = state.compose()
    return Group(build_table(state, page), build_status(state, page))
