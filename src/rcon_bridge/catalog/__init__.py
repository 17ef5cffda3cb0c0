"""Item catalog and requested-item validation.

store.py      ItemCatalog  : loads the known item identifiers and answers
                              membership and suggestion queries.
validator.py  ItemValidator: partitions requested items into valid and
                              invalid buckets against the catalog.
"""

from rcon_bridge.catalog.store import ItemCatalog
from rcon_bridge.catalog.validator import ItemValidator

__all__ = ["ItemCatalog", "ItemValidator"]
