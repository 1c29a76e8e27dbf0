"""Credential cache with single-flight refresh."""

from __future__ import annotations

import asyncio
from datetime import timedelta

from awsbase.credentials.providers import Credentials, CredentialsProvider


class CredentialsCache:
    """Wraps a provider so ``retrieve`` only calls it again once credentials expire.

    Concurrent callers that find no usable value share one in-flight refresh.
    """

    def __init__(
        self,
        provider: CredentialsProvider,
        expiry_window: timedelta = timedelta(0),
    ) -> None:
        self._provider = provider
        self._expiry_window = expiry_window
        self._value: Credentials | None = None
        self._in_flight: asyncio.Future[Credentials] | None = None
        self._lock = asyncio.Lock()

    @property
    def provider(self) -> CredentialsProvider:
        return self._provider

    def invalidate(self) -> None:
        """Force the next ``retrieve`` to refresh from the wrapped provider."""
        self._value = None

    async def retrieve(self) -> Credentials:
        while True:
            async with self._lock:
                value = self._value
                if value is not None and not value.expired(self._expiry_window):
                    return value

                in_flight = self._in_flight
                if in_flight is None:
                    in_flight = asyncio.get_running_loop().create_future()
                    self._in_flight = in_flight
                    should_refresh = True
                else:
                    should_refresh = False

            if should_refresh:
                return await self._refresh(in_flight)

            try:
                return await asyncio.shield(in_flight)
            except asyncio.CancelledError:
                # The refreshing caller was cancelled, not this one: try again.
                if in_flight.cancelled():
                    continue
                raise

    async def _refresh(self, in_flight: asyncio.Future[Credentials]) -> Credentials:
        try:
            creds = await self._provider.retrieve()
        except BaseException as exc:
            async with self._lock:
                if self._in_flight is in_flight:
                    self._in_flight = None
            if not in_flight.done():
                if isinstance(exc, asyncio.CancelledError):
                    in_flight.cancel()
                else:
                    in_flight.set_exception(exc)
                    # Waiters re-raise it; mark retrieved so an unobserved failure is not logged.
                    in_flight.exception()
            raise

        async with self._lock:
            self._value = creds
            if self._in_flight is in_flight:
                self._in_flight = None
            if not in_flight.done():
                in_flight.set_result(creds)

        return creds
