"""
Message handler adapters.

Consumer message handlers come in two shapes: plain functions and coroutine
functions, both taking the message body. The adapters below turn either into
a uniform ``async (Message) -> Any`` handler whose exception, if any, is the
single failure channel.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from pactum.models import Message

MessageHandler = Callable[[Message], Awaitable[Any]]

_ADAPTED_MARKER = "__pactum_handler__"


def _mark(handler: MessageHandler) -> MessageHandler:
    setattr(handler, _ADAPTED_MARKER, True)
    return handler


def asynchronous_body_handler(fn: Callable[[Any], Awaitable[Any]]) -> MessageHandler:
    """Adapt a handler that returns an awaitable.

    The awaitable's result is forwarded and its exception propagates.
    """

    async def handler(message: Message) -> Any:
        return await fn(message.contents)

    return _mark(handler)


def synchronous_body_handler(fn: Callable[[Any], Any]) -> MessageHandler:
    """Adapt a handler that runs synchronously.

    Anything it raises becomes the adapted handler's exception. A handler that
    turns out to return an awaitable (a lambda around a coroutine function,
    an object with ``async def __call__``) is awaited, so its failure is not
    lost.
    """

    async def handler(message: Message) -> Any:
        result = fn(message.contents)
        if inspect.isawaitable(result):
            return await result
        return result

    return _mark(handler)


def as_message_handler(fn: Callable[..., Any]) -> MessageHandler:
    """Pick the adapter matching ``fn``; adapted handlers pass through."""
    if getattr(fn, _ADAPTED_MARKER, False):
        return fn
    call = getattr(fn, "__call__", None)
    if inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(call):
        return asynchronous_body_handler(fn)
    return synchronous_body_handler(fn)
