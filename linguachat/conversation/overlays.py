"""Menu overlays, outside-click dismissal and the drag indicator.

An open overlay registers a pointer-down listener on the PointerEventBus and
removes it again when it closes, so no global handler outlives its menu.
"""

import logging
from collections.abc import Callable, Sequence
from enum import Enum

from linguachat.conversation.staging import InputStagingArea
from linguachat.models.schemas import IncomingFile, Language

logger = logging.getLogger(__name__)

PointerListener = Callable[[Sequence[str]], None]


class Overlay(str, Enum):
    """Menu-like surfaces, named after the region that anchors them."""

    HEADER_LANGUAGE = "header_language"
    INPUT_LANGUAGE = "input_language"


class PointerEventBus:
    """Document-level pointer-down listeners.

    A pointer-down target is described by its region path: the anchor ids of
    every region containing the target, innermost first. An empty path means
    the target lies outside every anchored region.
    """

    def __init__(self) -> None:
        self._listeners: list[PointerListener] = []

    def add_listener(self, listener: PointerListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PointerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def pointer_down(self, target_path: Sequence[str]) -> None:
        # Listeners may unregister themselves while being dispatched.
        for listener in list(self._listeners):
            listener(target_path)

    def __len__(self) -> int:
        return len(self._listeners)


class OverlayRouter:
    """Tracks overlay visibility and the transient drag flag."""

    def __init__(self, staging: InputStagingArea, pointer_events: PointerEventBus) -> None:
        self._staging = staging
        self._pointer_events = pointer_events
        self._listeners: dict[Overlay, PointerListener] = {}
        self.dragging = False

    def is_open(self, overlay: Overlay) -> bool:
        return overlay in self._listeners

    def open(self, overlay: Overlay) -> None:
        if self.is_open(overlay):
            return

        def dismiss_if_outside(target_path: Sequence[str]) -> None:
            if overlay.value not in target_path:
                logger.debug(f"Pointer down outside {overlay.value}; closing")
                self.close(overlay)

        self._listeners[overlay] = dismiss_if_outside
        self._pointer_events.add_listener(dismiss_if_outside)

    def close(self, overlay: Overlay) -> None:
        listener = self._listeners.pop(overlay, None)
        if listener is not None:
            self._pointer_events.remove_listener(listener)

    def toggle(self, overlay: Overlay) -> None:
        """Flip one overlay; the other one is left alone."""
        if self.is_open(overlay):
            self.close(overlay)
        else:
            self.open(overlay)

    def close_all(self) -> None:
        """Close every overlay and drop its listener (unmount)."""
        for overlay in list(self._listeners):
            self.close(overlay)

    def choose_language(self, overlay: Overlay, language: Language) -> None:
        """Pick a language from a menu, which then closes."""
        self._staging.set_language(language)
        self.close(overlay)

    def drag_over(self) -> None:
        self.dragging = True

    def drag_leave(self) -> None:
        self.dragging = False

    def drop(self, files: Sequence[IncomingFile]) -> None:
        """Stage the first dropped file; extra files are ignored."""
        self.dragging = False
        if files:
            if len(files) > 1:
                logger.debug(f"Ignoring {len(files) - 1} extra dropped file(s)")
            self._staging.stage_attachment(files[0])
