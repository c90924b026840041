"""Interactive fuzzy picker for git-pj using Textual."""

from typing import List, Optional, Sequence

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Input, OptionList
from textual.widgets.option_list import Option

from .__version__ import __version__
from .logging_config import get_logger
from .utils.fuzzy import fuzzy_rank

logger = get_logger(__name__)


class RepoPickerApp(App[Optional[int]]):
    """Pick one entry out of ``items`` by fuzzy search.

    ``run()`` returns the index of the chosen item in ``items``, or None if
    the user cancelled.
    """

    TITLE = "pj"

    CSS = """
    #query {
        dock: top;
        margin: 0 1;
    }

    #matches {
        height: 1fr;
        max-height: 12;
        margin: 0 1;
        border: solid $secondary;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+c", "cancel", "Cancel", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("up", "cursor_up", "Up", show=False),
        Binding("ctrl+n", "cursor_down", "Down", show=False),
        Binding("ctrl+p", "cursor_up", "Up", show=False),
    ]

    def __init__(self, items: Sequence[str], query: str = "", prompt: str = "Input repo name to search"):
        super().__init__()
        self.items = list(items)
        self.initial_query = query
        self.prompt = prompt
        self.matches: List[int] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(value=self.initial_query, placeholder=self.prompt, id="query")
        yield OptionList(id="matches")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = f"v{__version__}"
        self._refresh_matches(self.initial_query)
        self.query_one("#query", Input).focus()

    def _refresh_matches(self, query: str) -> None:
        """Re-rank items against ``query`` and redraw the option list."""
        self.matches = [idx for idx, _ in fuzzy_rank(query, self.items)]
        option_list = self.query_one("#matches", OptionList)
        option_list.clear_options()
        option_list.add_options([Option(self.items[idx], id=str(idx)) for idx in self.matches])
        if self.matches:
            option_list.highlighted = 0
        logger.debug(f"{len(self.matches)} matches for {query!r}")

    @on(Input.Changed, "#query")
    def handle_query_changed(self, event: Input.Changed) -> None:
        self._refresh_matches(event.value)

    @on(Input.Submitted, "#query")
    def handle_query_submitted(self, event: Input.Submitted) -> None:
        option_list = self.query_one("#matches", OptionList)
        highlighted = option_list.highlighted
        if highlighted is None or not self.matches:
            self.bell()
            return
        self.exit(self.matches[highlighted])

    @on(OptionList.OptionSelected, "#matches")
    def handle_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(int(event.option.id))

    def action_cursor_down(self) -> None:
        self.query_one("#matches", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#matches", OptionList).action_cursor_up()

    def action_cancel(self) -> None:
        self.exit(None)


def pick(items: Sequence[str], query: str = "") -> Optional[int]:
    """Run the picker and return the chosen index, or None when cancelled."""
    return RepoPickerApp(items, query=query).run()
