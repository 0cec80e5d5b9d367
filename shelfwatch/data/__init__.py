from .interface import InventoryStore
from .util import get_inventory_store

__all__ = ["InventoryStore", "get_inventory_store"]
