"""Change notification dispatch from controls to their form container."""

from typing import Any, Callable

import structlog

from webapi_controls.shared.models import ValueChangeEvent

logger = structlog.get_logger()

Listener = Callable[[ValueChangeEvent], None]


class ChangeEmitter:
    """Delivers value change events to listeners, bubbling to a parent emitter.

    A control owns one emitter whose parent is the form container's emitter,
    so a listener on the container sees every control's changes.
    """

    def __init__(self, name: str = "form", parent: "ChangeEmitter | None" = None):
        self.name = name
        self.parent = parent
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def child(self, name: str) -> "ChangeEmitter":
        """Create an emitter for a control nested in this one."""
        return ChangeEmitter(name=name, parent=self)

    def emit(self, value: Any) -> ValueChangeEvent:
        """Publish ``value`` as a change event from this emitter."""
        event = ValueChangeEvent(detail=value, source=self.name)
        logger.debug("Emitting value change", source=self.name, event_type=event.type)
        self.dispatch(event)
        return event

    def dispatch(self, event: ValueChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

        if event.bubbles and self.parent is not None:
            self.parent.dispatch(event)
