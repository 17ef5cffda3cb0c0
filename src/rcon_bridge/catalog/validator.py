"""Item validator for requested ``give`` items.

``ItemValidator`` partitions a batch of :class:`~rcon_bridge.types.RequestedItem`
into valid and invalid buckets before any command reaches the server.

Validation pipeline (per item, in input order)
----------------------------------------------
1. **Quantity bounds**: a quantity outside ``[1, 64]`` adds one general
   error naming the item and the quantity.  The item lands in neither
   bucket.
2. **Exact match**: a case-insensitive catalog hit goes to
   ``valid_items`` unchanged.
3. **Suggestion**: anything else goes to ``invalid_items`` together with
   up to three suggestions from :meth:`ItemCatalog.suggest`.

Invalid items are an expected, user-correctable outcome, so they are
reported as data in :class:`~rcon_bridge.types.ValidationOutcome` and never
raised.  The only exception that can escape is
:class:`~rcon_bridge.errors.NotLoadedError` from an unloaded catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rcon_bridge.catalog.store import ItemCatalog
from rcon_bridge.types import InvalidItem, RequestedItem, ValidationOutcome

logger = logging.getLogger(__name__)

MIN_QUANTITY = 1
MAX_QUANTITY = 64

# Suggestions attached to each invalid item.
MAX_SUGGESTIONS = 3


class ItemValidator:
    """Validates requested items against an :class:`ItemCatalog`.

    Holds no state of its own beyond the catalog reference, so one
    instance can serve concurrent requests.
    """

    def __init__(self, catalog: ItemCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    def validate(self, requests: Iterable[RequestedItem]) -> ValidationOutcome:
        """Validate ``requests`` and return a fresh outcome.

        Args:
            requests: Requested items in caller order.

        Returns:
            A :class:`ValidationOutcome`; ``is_valid`` holds iff no item was
            invalid and no general error was recorded.
        """
        valid: list[RequestedItem] = []
        invalid: list[InvalidItem] = []
        errors: list[str] = []

        for item in requests:
            if not MIN_QUANTITY <= item.quantity <= MAX_QUANTITY:
                errors.append(
                    f"Invalid quantity {item.quantity} for {item.item_name}. "
                    f"Must be between {MIN_QUANTITY} and {MAX_QUANTITY}."
                )
                continue

            if self._catalog.contains(item.item_name):
                valid.append(item)
                continue

            suggestions = self._catalog.suggest(item.item_name, MAX_SUGGESTIONS)
            invalid.append(InvalidItem(item=item, suggestions=tuple(suggestions)))

        outcome = ValidationOutcome(
            valid_items=tuple(valid),
            invalid_items=tuple(invalid),
            general_errors=tuple(errors),
        )
        if not outcome.is_valid:
            logger.info(
                "Item validation failed: %d invalid item(s), %d error(s)",
                len(invalid),
                len(errors),
            )
        return outcome
