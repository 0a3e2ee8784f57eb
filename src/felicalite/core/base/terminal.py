from __future__ import annotations

import logging
from typing import Callable

from felicalite.core.base.message import Message, Result

lg = logging.getLogger(__name__)

_HANDLES_ATTR = "_handles_message"


def handles(message_cls: type[Message]) -> Callable:
    """Mark a terminal method as the handler for *message_cls*."""

    def decorator(method: Callable) -> Callable:
        setattr(method, _HANDLES_ATTR, message_cls)
        return method

    return decorator


class Terminal:
    """Dispatches Message objects to the methods marked with @handles.

    Handlers are collected per class when it is defined; subclasses inherit
    their parents' handlers and may override them per message type.
    """

    _handlers: dict[type[Message], str] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        handlers = dict(cls._handlers)
        for name, attr in vars(cls).items():
            message_cls = getattr(attr, _HANDLES_ATTR, None)
            if message_cls is not None:
                handlers[message_cls] = name
        cls._handlers = handlers

    def send(self, message: Message) -> Result:
        try:
            handler_name = self._handlers[type(message)]
        except KeyError:
            raise ValueError(
                f"{type(self).__name__} cannot handle {type(message).__name__}"
            ) from None
        lg.debug("%s -> %s", type(message).__name__, handler_name)
        return getattr(self, handler_name)(message)

    @property
    def supported_messages(self) -> list[type[Message]]:
        return list(self._handlers)

    def on_error(self, error: Exception) -> None:
        """Log an exception that escaped the terminal (called by the app layer)."""
        lg.error("%s: %s", type(error).__name__, error)
