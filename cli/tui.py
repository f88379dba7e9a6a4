#!/usr/bin/env python3
"""DayBlocks TUI — today's blocks, progress and streak in the terminal."""

from __future__ import annotations

import logging
import os
import sys
from datetime import date

from rich.text import Text

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    ProgressBar,
    Static,
)

from dayblocks import CATEGORIES, DayBlocks, DayCount, init_workspace, log_path, workspace_root


# ── Rendering helpers ──────────────────────────────────────────


def render_week_chart(week: list[DayCount], width: int = 20) -> str:
    """Horizontal text bar chart of completed blocks per day."""
    top = max((d.completed for d in week), default=0)
    lines = []
    for d in week:
        bar = "█" * (round(d.completed / top * width) if top else 0)
        lines.append(f"{d.label}  {bar} {d.completed}")
    return "\n".join(lines)


def header_date(day: str) -> str:
    """'Mon Jan 01 2024' style date shown under the title."""
    return date.fromisoformat(day).strftime("%a %b %d %Y")


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#add-row {
    height: auto;
    padding: 0 1;
}

#new-title {
    width: 1fr;
}

#add-options {
    width: auto;
    padding: 1 1 0 2;
    color: $text-muted;
}

#stats-row {
    height: auto;
    padding: 0 1;
}

#progress-label, #streak-label {
    width: auto;
    padding: 0 2 0 0;
}

#streak-label {
    text-style: bold;
    color: $warning;
}

#blocks-table {
    height: 1fr;
    margin: 1 1 0 1;
}

#week-chart {
    height: auto;
    padding: 1 2;
    border: tall $primary-background-darken-2;
    display: none;
}

.section-title {
    text-style: bold;
    margin: 1 0 0 1;
}
"""


# ── Main app ───────────────────────────────────────────────────


class DayBlocksApp(App):
    """DayBlocks — daily blocks with recurring tasks and a streak."""

    TITLE = "DayBlocks"
    CSS = CSS

    BINDINGS = [
        Binding("a", "focus_input", "Add"),
        Binding("c", "cycle_category", "Category"),
        Binding("p", "toggle_repeat", "Repeat daily"),
        Binding("x", "toggle_block", "Done"),
        Binding("shift+up", "move_up", "Move up"),
        Binding("shift+down", "move_down", "Move down"),
        Binding("delete", "delete_block", "Delete"),
        Binding("ctrl+d", "stop_and_delete", "Delete + stop repeat", show=False),
        Binding("w", "toggle_week", "Weekly"),
        Binding("escape", "blur_input", "Back", show=False),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, session: DayBlocks) -> None:
        super().__init__()
        self.session = session
        self._row_ids: list[str] = []
        self.category = session.settings.default_category
        self.repeat_daily = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Horizontal(
                Input(placeholder="What will you execute next?", id="new-title"),
                Static(id="add-options"),
                id="add-row",
            ),
            Horizontal(
                Label(id="progress-label"),
                ProgressBar(total=100, show_eta=False, id="progress-bar"),
                Label(id="streak-label"),
                id="stats-row",
            ),
            DataTable(id="blocks-table", cursor_type="row"),
            Label("Weekly analytics", classes="section-title"),
            Static(id="week-chart"),
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#blocks-table", DataTable)
        table.add_columns("", "Block", "Category")
        self.refresh_view()
        table.focus()

    # ── View ────────────────────────────────────────────────────

    def refresh_view(self, select: str | None = None) -> None:
        """Redraw everything from the session; keep *select* highlighted."""
        summary = self.session.summary()
        self.sub_title = header_date(summary["date"])

        table = self.query_one("#blocks-table", DataTable)
        table.clear()
        self._row_ids = []
        for block in self.session.todays_blocks():
            mark = "☑" if block.completed else "☐"
            meta = block.category + (" • Daily" if block.is_recurring else "")
            title = Text(block.title, style="strike dim" if block.completed else "")
            table.add_row(mark, title, meta, key=block.id)
            self._row_ids.append(block.id)
        if select in self._row_ids:
            table.move_cursor(row=self._row_ids.index(select))

        self.query_one("#progress-label", Label).update(f"Daily progress {summary['progress']}%")
        self.query_one("#progress-bar", ProgressBar).update(progress=summary["progress"])
        self.query_one("#streak-label", Label).update(f"Consistency: {summary['streak']} days")
        self.query_one("#week-chart", Static).update(
            render_week_chart(self.session.weekly_histogram())
        )
        self._update_add_options()

    def _update_add_options(self) -> None:
        repeat = "☑" if self.repeat_daily else "☐"
        self.query_one("#add-options", Static).update(f"{self.category}  {repeat} Repeat daily")

    def _selected_id(self) -> str | None:
        table = self.query_one("#blocks-table", DataTable)
        if not self._row_ids or table.cursor_row is None:
            return None
        if 0 <= table.cursor_row < len(self._row_ids):
            return self._row_ids[table.cursor_row]
        return None

    # ── Adding ──────────────────────────────────────────────────

    @on(Input.Submitted, "#new-title")
    def _on_submit(self, event: Input.Submitted) -> None:
        block, errors = self.session.add_block(event.value, self.category, self.repeat_daily)
        if errors:
            self.notify("; ".join(errors), severity="warning")
            return
        event.input.value = ""
        self.repeat_daily = False
        self.refresh_view(select=block.id if block else None)

    def action_focus_input(self) -> None:
        self.query_one("#new-title", Input).focus()

    def action_blur_input(self) -> None:
        self.query_one("#blocks-table", DataTable).focus()

    def action_cycle_category(self) -> None:
        i = CATEGORIES.index(self.category) if self.category in CATEGORIES else -1
        self.category = CATEGORIES[(i + 1) % len(CATEGORIES)]
        self._update_add_options()

    def action_toggle_repeat(self) -> None:
        self.repeat_daily = not self.repeat_daily
        self._update_add_options()

    # ── Block actions ───────────────────────────────────────────

    def action_toggle_block(self) -> None:
        block_id = self._selected_id()
        if block_id and self.session.toggle_completed(block_id):
            self.refresh_view(select=block_id)

    def action_delete_block(self) -> None:
        self._delete(stop_recurring=False)

    def action_stop_and_delete(self) -> None:
        self._delete(stop_recurring=True)

    def _delete(self, stop_recurring: bool) -> None:
        block_id = self._selected_id()
        if not block_id:
            return
        index = self._row_ids.index(block_id)
        if self.session.delete_block(block_id, stop_recurring=stop_recurring):
            remaining = [i for i in self._row_ids if i != block_id]
            follow = remaining[min(index, len(remaining) - 1)] if remaining else None
            self.refresh_view(select=follow)

    def action_move_up(self) -> None:
        self._move(-1)

    def action_move_down(self) -> None:
        self._move(1)

    def _move(self, step: int) -> None:
        """Keyboard stand-in for dragging onto the neighbouring block."""
        block_id = self._selected_id()
        if not block_id:
            return
        index = self._row_ids.index(block_id) + step
        if not 0 <= index < len(self._row_ids):
            return
        if self.session.reorder(block_id, self._row_ids[index]):
            self.refresh_view(select=block_id)

    def action_toggle_week(self) -> None:
        chart = self.query_one("#week-chart", Static)
        chart.display = not chart.display


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    try:
        init_workspace(root)
    except OSError as e:
        print(f"Cannot create workspace {root}: {e}")
        print("Set DAYBLOCKS_ROOT to a writable directory.")
        sys.exit(1)

    logging.basicConfig(
        filename=str(log_path(root)),
        level=os.environ.get("DAYBLOCKS_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = DayBlocksApp(DayBlocks(root))
    app.run()


if __name__ == "__main__":
    main()
