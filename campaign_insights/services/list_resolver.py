"""Resolve configured dashboard tabs to Mailchimp audience list ids."""

import logging
import time
from collections.abc import Callable

from ..exceptions import ValidationError
from ..ingestion.client import MailchimpClient
from ..models.upstream import AudienceList
from ..settings import AccountConfig, ListTab

logger = logging.getLogger(__name__)


def match_tabs(tabs: list[ListTab], lists: list[AudienceList]) -> dict[str, str]:
    """Map tab key -> list id by case-insensitive substring of the list name.

    The first list (in upstream order) whose name contains the tab's `match`
    wins. Tabs with no matching list are left out.
    """
    mapping: dict[str, str] = {}
    for tab in tabs:
        needle = tab.match.casefold()
        for audience in lists:
            if needle in audience.name.casefold():
                mapping[tab.key] = audience.id
                break
    return mapping


class ListResolver:
    """Memoized tab -> list id mapping per account.

    The mapping is rebuilt from `/lists` only when older than `max_age`
    seconds or when forced.
    """

    def __init__(
        self,
        client: MailchimpClient,
        max_age: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.max_age = max_age
        self._clock = clock
        self._resolved: dict[str, tuple[float, dict[str, str]]] = {}

    def resolve(
        self, account_key: str, account: AccountConfig, force: bool = False
    ) -> dict[str, str]:
        """Return {tab key: list id} for the account, refreshing if stale."""
        now = self._clock()
        cached = self._resolved.get(account_key)
        if cached and not force and now - cached[0] < self.max_age:
            return cached[1]

        lists = self.client.get_lists(account.credentials())
        mapping = match_tabs(account.tabs, lists)

        unmatched = [t.key for t in account.tabs if t.key not in mapping]
        if unmatched:
            logger.warning(
                "No audience list matched tabs %s for account '%s'",
                unmatched,
                account.label,
            )

        self._resolved[account_key] = (now, mapping)
        return mapping

    def list_id(self, account_key: str, account: AccountConfig, tab_key: str) -> str:
        """Resolve one tab.

        Raises:
            ValidationError: If the tab is not configured or matched no list
        """
        account.tab(tab_key)
        mapping = self.resolve(account_key, account)
        try:
            return mapping[tab_key]
        except KeyError:
            raise ValidationError(
                f"No audience list matches '{tab_key}' for account '{account.label}'"
            ) from None
