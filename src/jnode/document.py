"""Shared document text and the raw text buffer that mirrors it."""

from __future__ import annotations

from typing import Callable

Observer = Callable[[str], None]


class DocumentStore:
    """The full document text.

    The text is only ever replaced as a whole; observers are called in
    subscription order after the new text is in place.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._observers: list[Observer] = []

    def read_text(self) -> str:
        return self._text

    def replace_text(self, text: str) -> None:
        self._text = text
        for observer in list(self._observers):
            observer(text)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)
        return lambda: self._observers.remove(observer)


class TextBuffer:
    """Raw text view contents (the file buffer shown beside the tree)."""

    def __init__(self, contents: str = "") -> None:
        self.contents = contents
        self.has_changes = False
        self._observers: list[Observer] = []

    def set_contents(self, text: str, dirty: bool = False) -> None:
        self.contents = text
        self.has_changes = dirty
        for observer in list(self._observers):
            observer(text)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)
        return lambda: self._observers.remove(observer)

    def follow(self, store: DocumentStore) -> Callable[[], None]:
        """Keep this buffer in lockstep with ``store``."""
        return store.subscribe(lambda text: self.set_contents(text, dirty=False))
