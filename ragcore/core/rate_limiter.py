"""
Per-tenant sliding-window limiter for embedding submissions.

Counts texts, not calls: a tenant may submit at most `limit` texts in any
rolling `window_seconds`. Callers over the limit wait for capacity.

Dependencies: asyncio, collections
System role: Keeps one tenant from starving the shared embed queue
"""

import asyncio
import logging
import time
from collections import defaultdict, deque
from typing import Callable, Hashable

from ragcore.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class TenantRateLimiter:
    """Sliding-window text budget per tenant."""

    def __init__(
        self,
        limit: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize limiter.

        Args:
            limit: Texts allowed per window per tenant
            window_seconds: Window length
            clock: Monotonic time source
        """
        if limit <= 0:
            raise ValidationError("rate limit must be positive", field="limit")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._usage: dict[Hashable, deque[tuple[float, int]]] = defaultdict(deque)

    def used(self, tenant: Hashable) -> int:
        """Texts consumed by a tenant in the current window."""
        usage = self._usage[tenant]
        self._prune(usage, self._clock())
        return sum(count for _, count in usage)

    async def acquire(self, tenant: Hashable | None, count: int) -> None:
        """
        Reserve capacity for `count` texts, waiting while the window is full.

        Args:
            tenant: Tenant key; None bypasses the limiter
            count: Texts about to be submitted

        Raises:
            ValidationError: If count alone exceeds the window budget
        """
        if tenant is None or count <= 0:
            return
        if count > self.limit:
            raise ValidationError(
                f"submission of {count} texts exceeds the per-tenant limit of {self.limit}",
                field="texts",
            )

        usage = self._usage[tenant]
        while True:
            now = self._clock()
            self._prune(usage, now)
            if sum(c for _, c in usage) + count <= self.limit:
                usage.append((now, count))
                return

            delay = usage[0][0] + self.window_seconds - now
            logger.info(
                f"{__name__}:acquire - Tenant over budget, waiting",
                extra={"tenant": str(tenant), "delay_s": round(delay, 3)},
            )
            await asyncio.sleep(max(delay, 0.0))

    def _prune(self, usage: deque[tuple[float, int]], now: float) -> None:
        while usage and usage[0][0] + self.window_seconds <= now:
            usage.popleft()
