"""
Promise-like requests exchanged with the organization client.

The client hands the shell ``resolve``/``reject`` callables for requests
that complete later (identity edits, path changes). ``PendingRequest``
produces such a pair backed by an ``asyncio.Future`` so the requesting
side can simply ``await request.future``.
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional, Type

from ..domain.exceptions import RecoverableError


ResolveFn = Callable[..., None]
RejectFn = Callable[[Any], None]


class PendingRequest:
    """
    Future-backed resolve/reject pair.

    Both callables are idempotent: once the future is done, later calls
    are ignored. A plain string rejection reason is wrapped in
    ``error_type``.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        error_type: Type[Exception] = RecoverableError,
    ):
        self._loop = loop or asyncio.get_running_loop()
        self._error_type = error_type
        self.future: asyncio.Future = self._loop.create_future()

    def resolve(self, value: Any = None) -> None:
        if not self.future.done():
            self.future.set_result(value)

    def reject(self, reason: Any) -> None:
        if self.future.done():
            return
        if isinstance(reason, BaseException):
            self.future.set_exception(reason)
        else:
            self.future.set_exception(self._error_type(str(reason)))

    @property
    def done(self) -> bool:
        return self.future.done()


@dataclass(frozen=True)
class IdentityIntentRequest:
    """Request from an app instance to edit the label of an address."""
    address: str
    resolve: ResolveFn
    reject: RejectFn


@dataclass(frozen=True)
class PathRequest:
    """Request from an app instance to change its visible sub-path."""
    app_address: str
    path: str
    resolve: ResolveFn
    reject: RejectFn


@dataclass(frozen=True)
class IdentityIntent:
    """Identity modification exposed to the edit UI, with a pre-filled label."""
    address: str
    label: Optional[str]
    resolve: ResolveFn
    reject: RejectFn
