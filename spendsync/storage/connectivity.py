"""Connectivity signal.

Tracks whether the remote store is reachable and notifies subscribers on
each transition. Reachability is either pushed in with ``set_reachable`` or
polled from a probe with ``refresh``; probe results are cached for a short
TTL so frequent reads do not hammer the backend.
"""

import logging
import time
from typing import TYPE_CHECKING, List, Optional

from spendsync.protocols import ConnectivityProbe, ReachabilityHandler, Unsubscribe

if TYPE_CHECKING:
    from .sync_engine import SyncDriver

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 30.0  # seconds


class ConnectivityMonitor:
    """Observes reachable/unreachable transitions.

    Args:
        probe: Returns True when the remote is reachable. Exceptions count
            as unreachable.
        initial: Starting reachability. When None the probe is consulted
            on first use (False if there is no probe).
        cache_ttl: Seconds a probe result is reused by ``refresh()``.
    """

    def __init__(
        self,
        probe: Optional[ConnectivityProbe] = None,
        initial: Optional[bool] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ):
        self._probe = probe
        self._cache_ttl = cache_ttl
        self._handlers: List[ReachabilityHandler] = []
        self._last_check: Optional[float] = None
        self._online: Optional[bool] = initial

    @property
    def online(self) -> bool:
        if self._online is None:
            self.refresh(force=True)
        return bool(self._online)

    def subscribe(self, handler: ReachabilityHandler) -> Unsubscribe:
        """Call ``handler(online)`` on every transition."""
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def set_reachable(self, reachable: bool) -> bool:
        """Record the current reachability. Emits only on actual transitions.

        Returns:
            True if this call changed the state.
        """
        reachable = bool(reachable)
        previous = self._online
        if previous == reachable:
            return False
        self._online = reachable
        if previous is None:
            # First determination is a starting state, not a transition
            return True

        logger.info("Connectivity: %s", "online" if reachable else "offline")
        for handler in list(self._handlers):
            try:
                handler(reachable)
            except Exception as e:
                logger.error(f"Connectivity handler failed: {e}", exc_info=True)
        return True

    def _check_probe(self) -> bool:
        if self._probe is None:
            return bool(self._online)
        try:
            return bool(self._probe())
        except Exception as e:
            logger.debug(f"Connectivity check failed: {e}", exc_info=True)
            return False

    def refresh(self, force: bool = False) -> bool:
        """Poll the probe and apply the result.

        Args:
            force: Ignore the cached result.

        Returns:
            Current reachability.
        """
        now = time.monotonic()
        if (
            not force
            and self._last_check is not None
            and self._online is not None
            and now - self._last_check < self._cache_ttl
        ):
            return self._online

        reachable = self._check_probe()
        self._last_check = now
        self.set_reachable(reachable)
        return reachable

    def bind_sync(self, driver: "SyncDriver") -> Unsubscribe:
        """Trigger ``driver`` once per transition to online.

        If already online at bind time (process start), triggers once
        immediately.
        """

        def on_change(reachable: bool):
            if reachable:
                driver.trigger()

        unsubscribe = self.subscribe(on_change)
        if self.online:
            driver.trigger()
        return unsubscribe
