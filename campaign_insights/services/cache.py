"""Per-session cache of campaign collections, keyed by scope."""

import logging
import threading
from dataclasses import dataclass

from ..analytics.models import CampaignMetrics
from ..models.scope import DateRange, Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchTicket:
    """Tag for an in-flight fetch: the scope it was started for and its order."""

    scope: Scope
    generation: int


@dataclass(frozen=True)
class CachedCampaigns:
    """A complete campaign collection and the window it was fetched for."""

    date_range: DateRange
    campaigns: tuple[CampaignMetrics, ...]


class ScopeCache:
    """Read-replace cache of campaign collections.

    A finished fetch replaces the whole entry for its scope. Results from a
    fetch whose scope is no longer the active one, or that was overtaken by
    a newer fetch, are discarded.

    Usage:
        ticket = cache.begin(scope)
        campaigns = fetcher.fetch(...)
        cache.store(ticket, date_range, campaigns)
    """

    def __init__(self) -> None:
        self._entries: dict[Scope, CachedCampaigns] = {}
        self._latest: dict[Scope, int] = {}
        self._active: Scope | None = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def active_scope(self) -> Scope | None:
        return self._active

    def activate(self, scope: Scope | None) -> None:
        """Switch the active scope without starting a fetch."""
        with self._lock:
            self._active = scope

    def begin(self, scope: Scope) -> FetchTicket:
        """Mark `scope` active and issue a ticket for a new fetch."""
        with self._lock:
            self._generation += 1
            self._active = scope
            self._latest[scope] = self._generation
            return FetchTicket(scope=scope, generation=self._generation)

    def store(
        self,
        ticket: FetchTicket,
        date_range: DateRange,
        campaigns: list[CampaignMetrics],
    ) -> bool:
        """Replace the entry for the ticket's scope.

        Returns:
            False if the result was stale and discarded, True if stored
        """
        with self._lock:
            if ticket.scope != self._active:
                logger.info("Discarding fetch for inactive scope %s", ticket.scope)
                return False
            if self._latest.get(ticket.scope) != ticket.generation:
                logger.info("Discarding superseded fetch for scope %s", ticket.scope)
                return False
            self._entries[ticket.scope] = CachedCampaigns(
                date_range=date_range, campaigns=tuple(campaigns)
            )
            return True

    def get(self, scope: Scope) -> CachedCampaigns | None:
        with self._lock:
            return self._entries.get(scope)

    def invalidate(self, scope: Scope | None = None) -> None:
        """Drop one scope, or everything when scope is None."""
        with self._lock:
            if scope is None:
                self._entries.clear()
            else:
                self._entries.pop(scope, None)
