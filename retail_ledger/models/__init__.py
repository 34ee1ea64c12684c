from retail_ledger.models.store import Company, SalesArea, Store, Warehouse
from retail_ledger.models.product import Product
from retail_ledger.models.inventory import SalesAreaInventory, WarehouseInventory
from retail_ledger.models.ledger import Inflow, Movement, Outflow, Sale, Withdraw
