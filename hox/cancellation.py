"""Cancellation signal passed to deferred nodes when they are driven."""

from __future__ import annotations

import asyncio


class CancellationToken:
    """Cooperative cancellation flag shared by every thunk of one drive call."""

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise asyncio.CancelledError("markup resolution was cancelled")

    async def wait(self) -> None:
        """Block until the token is cancelled."""

        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def ensure_token(token: CancellationToken | None) -> CancellationToken:
    return token if token is not None else CancellationToken()


__all__ = ["CancellationToken", "ensure_token"]
