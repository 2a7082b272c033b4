"""Accept / edit / regenerate / cancel loop for a proposed commit message.

The loop is a small state machine. `transition` is pure; `InteractionLoop`
drives it and talks to the user through a `Terminal`, which tests replace.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from aicommit.cli.utils import ask, confirm, display_message, display_warnings, edit_message
from aicommit.config import Config
from aicommit.llm import LLMError
from aicommit.message import validate_message
from aicommit.output import dim, info, print_error


class State(Enum):
    PRESENTING = "presenting"
    COMMIT = "commit"
    EDIT = "edit"
    REGENERATE = "regenerate"
    CANCEL = "cancel"

    @property
    def is_terminal(self) -> bool:
        return self in (State.COMMIT, State.CANCEL)


class Action(Enum):
    USE = "use"
    EDIT = "edit"
    REGENERATE = "regenerate"
    CANCEL = "cancel"


_FROM_PRESENTING = {
    Action.USE: State.COMMIT,
    Action.EDIT: State.EDIT,
    Action.REGENERATE: State.REGENERATE,
    Action.CANCEL: State.CANCEL,
}


def transition(state: State, action: Action | None = None) -> State:
    """Next state. EDIT and REGENERATE always return to PRESENTING."""
    if state is State.PRESENTING:
        if action is None:
            raise ValueError("PRESENTING needs an action")
        return _FROM_PRESENTING[action]
    if state in (State.EDIT, State.REGENERATE):
        return State.PRESENTING
    raise ValueError(f"{state.name} is a terminal state")


@dataclass
class Outcome:
    state: State
    message: str
    push: bool = False

    @property
    def committed(self) -> bool:
        return self.state is State.COMMIT


# Menu keys: number or first letter
_MENU = [
    ("1", "u", "Use this message", Action.USE),
    ("2", "e", "Edit message", Action.EDIT),
    ("3", "r", "Regenerate message", Action.REGENERATE),
    ("4", "c", "Cancel", Action.CANCEL),
]


class Terminal:
    """Console implementation of the loop's user interaction."""

    def __init__(self, config: Config):
        self.config = config

    def show_message(self, message: str) -> None:
        display_message(message)
        display_warnings(validate_message(
            message,
            style=self.config.style,
            max_subject_length=self.config.max_subject_length,
            max_body_line_length=self.config.max_body_line_length,
        ))

    def choose_action(self) -> Action:
        print()
        for number, letter, label, _ in _MENU:
            print(f"  {info(number)}. {label} {dim(f'({letter})')}")
        while True:
            try:
                choice = input("What would you like to do? [1-4] (Enter to use): ").strip().lower()
            except EOFError:
                return Action.CANCEL
            if not choice:
                return Action.USE
            for number, letter, _, action in _MENU:
                if choice in (number, letter):
                    return action
            print(dim("  Enter 1-4"))

    def confirm_push(self) -> bool:
        return confirm("Push to remote after committing?", default=False)

    def edit(self, message: str) -> str | None:
        return edit_message(message)

    def ask_feedback(self) -> str:
        return ask("Any specific feedback for regeneration? (optional): ")

    def show_error(self, exc: Exception) -> None:
        print_error(str(exc))

    def show_notice(self, text: str) -> None:
        print(dim(text))


class InteractionLoop:
    """Runs PRESENTING -> ... until COMMIT or CANCEL."""

    def __init__(self, terminal: Terminal, regenerate: Callable[[str], str]):
        self.terminal = terminal
        self.regenerate = regenerate

    def run(self, message: str, non_interactive: bool = False) -> Outcome:
        if non_interactive:
            return Outcome(State.COMMIT, message, push=False)

        state = State.PRESENTING
        self.terminal.show_message(message)

        while True:
            state = transition(state, self.terminal.choose_action())

            if state is State.COMMIT:
                return Outcome(state, message, push=self.terminal.confirm_push())
            if state is State.CANCEL:
                return Outcome(state, message)

            if state is State.EDIT:
                edited = self.terminal.edit(message)
                if edited:
                    message = edited
                else:
                    self.terminal.show_notice("Edit aborted, keeping the previous message.")
            elif state is State.REGENERATE:
                feedback = self.terminal.ask_feedback()
                try:
                    message = self.regenerate(feedback)
                except LLMError as e:
                    self.terminal.show_error(e)
                    self.terminal.show_notice("Keeping the previous message.")

            state = transition(state)
            self.terminal.show_message(message)
