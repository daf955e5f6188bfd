"""Owned endpoint registry with serialized rebuilds and atomic publication."""

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple

from autoapi.constants import LogIcons
from autoapi.discovery.enumerator import SourceEnumerator
from autoapi.discovery.models import SourceDescriptor
from autoapi.exceptions import DiscoveryError

from .builder import RegistryBuilder
from .models import EndpointEntry, NamingCollision

logger = logging.getLogger(__name__)

RegistryListener = Callable[[Mapping[str, EndpointEntry]], Any]


class EndpointRegistry:
    """The live ``short_name -> EndpointEntry`` registry.

    Rebuilds run one at a time under an asyncio lock. Each rebuild builds a
    fresh dictionary and publishes it as a read-only mapping in a single
    reference swap, so readers see either the previous registry or the new
    one in full.

    When enumeration fails the previous registry stays in place (empty if no
    rebuild has succeeded yet) and the failure is kept in ``last_error``.

    Args:
        enumerator: Source enumerator for the host
        builder: Builder turning descriptors into entries
    """

    def __init__(self, enumerator: SourceEnumerator, builder: RegistryBuilder) -> None:
        self.enumerator = enumerator
        self.builder = builder
        self._snapshot: Mapping[str, EndpointEntry] = MappingProxyType({})
        self._lock: Optional[asyncio.Lock] = None
        self._listeners: List[RegistryListener] = []
        self.last_error: Optional[DiscoveryError] = None
        self.last_rebuilt_at: Optional[datetime] = None
        self.last_collisions: Tuple[NamingCollision, ...] = ()
        self.last_skipped: Tuple[SourceDescriptor, ...] = ()
        self.generation = 0

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def rebuilding(self) -> bool:
        """Whether a rebuild currently holds the lock."""
        return self._lock is not None and self._lock.locked()

    def add_listener(self, listener: RegistryListener) -> None:
        """Call ``listener(snapshot)`` after every successful publication."""
        self._listeners.append(listener)

    async def rebuild(self) -> bool:
        """Re-enumerate the host and publish a new registry.

        Returns:
            True if a new registry was published, False if discovery failed
            and the previous registry was kept
        """
        async with self._get_lock():
            try:
                descriptors = await self.enumerator.enumerate()
                result = self.builder.build_report(descriptors)
            except Exception as e:
                error = e if isinstance(e, DiscoveryError) else DiscoveryError(
                    f"Registry build failed: {type(e).__name__}: {e}",
                    details={"host": type(self.enumerator.host).__name__},
                )
                self.last_error = error
                logger.error(
                    f"{LogIcons.ERROR} Discovery failed, keeping "
                    f"{len(self._snapshot)} previously registered endpoints: {error}",
                    exc_info=e,
                )
                return False

            snapshot = MappingProxyType(dict(result.entries))
            self._snapshot = snapshot
            self.last_collisions = tuple(result.collisions)
            self.last_skipped = tuple(result.skipped)
            self.last_error = None
            self.last_rebuilt_at = datetime.now(timezone.utc)
            self.generation += 1

            logger.info(
                f"{LogIcons.DYNAMIC} Registry rebuilt with {len(snapshot)} endpoints "
                f"(generation {self.generation})"
            )
            await self._notify(snapshot)
            return True

    async def _notify(self, snapshot: Mapping[str, EndpointEntry]) -> None:
        for listener in list(self._listeners):
            try:
                outcome = listener(snapshot)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    f"{LogIcons.ERROR} Registry listener {listener!r} failed: {e}",
                    exc_info=True,
                )

    def snapshot(self) -> Mapping[str, EndpointEntry]:
        """Read-only view of the last published registry."""
        return self._snapshot

    def entries(self) -> Tuple[EndpointEntry, ...]:
        return tuple(self._snapshot.values())

    def get(self, short_name: str) -> Optional[EndpointEntry]:
        return self._snapshot.get(short_name)

    def current_registry(self) -> Tuple[Tuple[str, str], ...]:
        """Ordered ``(display_name, path)`` pairs for the admin display."""
        return tuple((e.display_name, e.path) for e in self._snapshot.values())

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._snapshot
