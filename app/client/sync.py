# app/client/sync.py
"""
Upload of locally held custom designs after sign-in.

Items are sent one at a time, in list order. A failing item never stops
the batch and nothing is rolled back; the local storage slot is cleared
only when every item made it to the server.
"""
import enum
import logging
from dataclasses import dataclass, field

from app.client.api import CartApiClient
from app.client.exceptions import CartApiError
from app.client.items import LocalCartItem
from app.client.storage import LocalCartStorage
from app.client.validation import MAX_DESIGN_IMAGE_CHARS, validate_custom_design

logger = logging.getLogger(__name__)


class SyncOutcome(str, enum.Enum):
    OK = "ok"
    VALIDATION_FAILED = "validation_failed"
    NETWORK_FAILED = "network_failed"


@dataclass
class ItemSyncResult:
    item: LocalCartItem
    outcome: SyncOutcome
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is SyncOutcome.OK


@dataclass
class SyncReport:
    """
    What happened to each local item, plus the state of the final fetch.
    """

    results: list[ItemSyncResult] = field(default_factory=list)
    cache_cleared: bool = False
    fetch_error: str | None = None
    wishlist_error: str | None = None

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def ok(self) -> bool:
        """True when every item synced and the cart was fetched."""
        return self.failed == 0 and self.fetch_error is None

    def failures(self, outcome: SyncOutcome | None = None) -> list[ItemSyncResult]:
        return [
            r for r in self.results
            if not r.ok and (outcome is None or r.outcome is outcome)
        ]


def local_custom_items(items) -> list[LocalCartItem]:
    """The lines that take part in a sync: local custom designs only."""
    return [
        it for it in items
        if isinstance(it, LocalCartItem) and it.is_custom_design
    ]


async def sync_local_custom_designs(
    api: CartApiClient,
    storage: LocalCartStorage,
    items: list[LocalCartItem],
    max_image_chars: int = MAX_DESIGN_IMAGE_CHARS,
) -> SyncReport:
    """
    Validate and upload each local custom design to the server cart.

    Args:
        api: client carrying the freshly available token.
        storage: the local cart slot; cleared only if nothing failed.
        items: local custom-design lines, attempted in this order.

    Returns:
        SyncReport with one ItemSyncResult per item (fetch fields unset).
    """
    report = SyncReport()
    if not items:
        return report

    logger.info(f"Syncing {len(items)} local custom designs to server...")

    for item in items:
        errors = validate_custom_design(item.design, max_image_chars)
        if errors:
            logger.error(f"Validation failed for item {item.name!r}: {errors}")
            report.results.append(
                ItemSyncResult(item, SyncOutcome.VALIDATION_FAILED, "; ".join(errors))
            )
            continue

        try:
            await api.add_custom_design(
                item.design,
                quantity=item.quantity,
                special_request=item.special_request,
            )
        except CartApiError as e:
            logger.error(f"Failed to sync item {item.design.name!r}: {e}")
            report.results.append(
                ItemSyncResult(item, SyncOutcome.NETWORK_FAILED, str(e))
            )
            continue

        logger.info(f"Successfully synced: {item.design.name}")
        report.results.append(ItemSyncResult(item, SyncOutcome.OK))

    logger.info(
        f"Sync complete: {report.succeeded} success, {report.failed} failed"
    )

    if report.failed == 0:
        storage.clear()
        report.cache_cleared = True
        logger.info("Local storage cleared after successful sync")
    else:
        logger.warning("Some items failed to sync, keeping local storage")

    return report
