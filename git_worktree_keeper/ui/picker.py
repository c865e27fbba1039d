"""Interactive pickers for branches and worktrees."""

from typing import Optional, Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Input, OptionList, SelectionList, Static
from textual.widgets.option_list import Option
from textual.widgets.selection_list import Selection


def fuzzy_match(query: str, text: str) -> bool:
    """True if the characters of ``query`` appear in ``text`` in order (case-insensitive)."""
    query = query.lower()
    text = text.lower()
    position = 0
    for char in query:
        position = text.find(char, position)
        if position < 0:
            return False
        position += 1
    return True


def fuzzy_filter(query: str, items: Sequence[str]) -> list[int]:
    """Indexes of ``items`` matching ``query``, in their original order."""
    if not query:
        return list(range(len(items)))
    return [i for i, item in enumerate(items) if fuzzy_match(query, item)]


class PickerApp(App[Optional[list[int]]]):
    """Filterable list; exits with the chosen indexes or None when cancelled."""

    DEFAULT_CSS = """
    #picker {
        height: 100%;
        padding: 0 1;
    }

    #picker-title {
        height: auto;
        padding: 0 0 1 0;
        text-style: bold;
    }

    #picker-items {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("d", "done", "Done"),
    ]

    def __init__(self, title: str, labels: Sequence[str], multi: bool = False):
        super().__init__()
        self.picker_title = title
        self.labels = list(labels)
        self.multi = multi
        self.visible_indices: list[int] = list(range(len(self.labels)))

    def compose(self) -> ComposeResult:
        with Vertical(id="picker"):
            yield Static(self.picker_title, id="picker-title")
            if self.multi:
                yield SelectionList[int](
                    *[Selection(label, i) for i, label in enumerate(self.labels)],
                    id="picker-items",
                )
            else:
                yield Input(placeholder="Type to filter", id="picker-filter")
                yield OptionList(
                    *[Option(label, id=str(i)) for i, label in enumerate(self.labels)],
                    id="picker-items",
                )
        yield Footer()

    def on_mount(self) -> None:
        if self.multi:
            self.query_one(SelectionList).focus()
        else:
            self.query_one(Input).focus()
            if self.labels:
                self.query_one(OptionList).highlighted = 0

    def on_input_changed(self, event: Input.Changed) -> None:
        """Re-filter the option list as the user types."""
        self.visible_indices = fuzzy_filter(event.value, self.labels)
        option_list = self.query_one(OptionList)
        option_list.clear_options()
        option_list.add_options([Option(self.labels[i], id=str(i)) for i in self.visible_indices])
        if self.visible_indices:
            option_list.highlighted = 0

    def on_input_submitted(self, event: Input.Submitted) -> None:
        option_list = self.query_one(OptionList)
        if option_list.highlighted is None or not self.visible_indices:
            return
        self.exit([self.visible_indices[option_list.highlighted]])

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit([int(event.option.id)])

    def action_done(self) -> None:
        if self.multi:
            self.exit(sorted(self.query_one(SelectionList).selected))

    def action_cancel(self) -> None:
        self.exit(None)
