"""Initialization Gate — lazy, idempotent, retry-able process start-up for serverless requests.

Invariants:
    - The start-up sequence (open -> probe -> seed) succeeds at most once per process
    - Fast path: once initialized, ensure_initialized() returns without suspending
    - The initializing check and set happen in one synchronous step (no await between)
    - Concurrent callers await the single in-flight attempt and share its outcome
    - A failed attempt resets state to not-initialized; the next request retries
    - No timeout or backoff here: the connection layer times out, each request is the retry

Design Decisions:
    - In-flight attempt runs as its own task, awaited through asyncio.shield
      (ADR: a cancelled request must not cancel start-up for its neighbours)
    - State kept in an InitializationState dataclass owned by one gate instance
      stored on app.state (ADR: explicit process-scoped state, no bare module flags)
    - Provider is duck-typed (open/ping/close) so tests swap in fakes
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

SeedRoutine = Callable[[], Awaitable[object]]


class ConnectionProvider(Protocol):
    """What the gate needs from the database layer."""

    async def open(self) -> object: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...

    async def health_check(self) -> bool: ...


@dataclass
class InitializationState:
    """Process-wide start-up state. Mutated only by InitializationGate."""
    initialized: bool = False
    initializing: bool = False
    attempts: int = 0
    last_error: str | None = None

    def to_dict(self) -> dict:
        return {
            "initialized": self.initialized,
            "initializing": self.initializing,
            "attempts": self.attempts,
            "last_error": self.last_error,
        }

    def reset(self) -> None:
        """Back to a cold process, in place: holders of this object see the change."""
        self.initialized = False
        self.initializing = False
        self.attempts = 0
        self.last_error = None


class InitializationGate:
    """Guards the one-time start-up action behind repeated request entry points."""

    def __init__(
        self,
        provider: ConnectionProvider,
        seed: SeedRoutine | None = None,
        probe: bool = True,
    ):
        self.provider = provider
        self.state = InitializationState()
        self._seed = seed
        self._probe = probe
        self._in_flight: asyncio.Task | None = None

    async def ensure_initialized(self) -> None:
        """Return once the connection is open and seed data exists; raise otherwise."""
        if self.state.initialized:
            return
        if self._in_flight is None:
            self.state.initializing = True
            self.state.attempts += 1
            self._in_flight = asyncio.ensure_future(self._initialize())
        await asyncio.shield(self._in_flight)

    async def _initialize(self) -> None:
        attempt = self.state.attempts
        try:
            await self.provider.open()
            logger.info("Database connection successful", extra={"attempt": attempt})
            if self._probe:
                await self.provider.ping()
            if self._seed is not None:
                await self._seed()
        except Exception as e:
            self.state.last_error = f"{type(e).__name__}: {e}"
            logger.error(
                f"Database initialization failed: {e}",
                extra={"attempt": attempt, "error_code": getattr(e, "code", None)},
            )
            raise
        else:
            self.state.initialized = True
            self.state.last_error = None
        finally:
            self.state.initializing = False
            self._in_flight = None

    async def shutdown(self) -> None:
        """Release the connection handle (long-running server only)."""
        in_flight = self._in_flight
        if in_flight is not None:
            # Let a concurrent attempt settle before disposing what it opened
            await asyncio.gather(in_flight, return_exceptions=True)
        await self.provider.close()
        self.state.reset()
        logger.info("Database connection closed")
