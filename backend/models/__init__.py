from models.users import User
from models.inventory_items import InventoryItem
from models.inventory_activity import InventoryActivity
from models.inventory_meta import InventoryMeta
from models.roosters import Rooster
from models.rooster_breeds import RoosterBreed
from models.sales_transactions import SalesTransaction
from models.suppliers import Supplier
from models.reviews import Review

__all__ = ['InventoryActivity', 'InventoryItem', 'InventoryMeta', 'Review', 'Rooster', 'RoosterBreed', 'SalesTransaction', 'Supplier', 'User',]
