# purchase_sdk/data_access/reference.py
import asyncio
import logging
from typing import Dict, Generic, Iterable, List, Optional, TypeVar, TYPE_CHECKING

from purchase_sdk.schemas.base import RecordId
from purchase_sdk.schemas.reference import Product, ReferenceEntity, Supplier, Warehouse

if TYPE_CHECKING:
    from .gateway import BackendGateway

logger = logging.getLogger("purchase_sdk.data_access.reference")

EntityType = TypeVar("EntityType", bound=ReferenceEntity)


def _key(item_id: Optional[RecordId]) -> Optional[str]:
    # Форма и бэкенд могут прислать один и тот же id как 3 и "3"
    return None if item_id is None else str(item_id)


class LookupSet(Generic[EntityType]):
    """Неизменяемый после загрузки набор справочных записей с поиском по id."""

    def __init__(self, items: Iterable[EntityType] = ()):
        self._items: List[EntityType] = list(items)
        self._by_id: Dict[str, EntityType] = {_key(item.id): item for item in self._items}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def get(self, item_id: Optional[RecordId]) -> Optional[EntityType]:
        return self._by_id.get(_key(item_id))

    def name_of(self, item_id: Optional[RecordId], default: str) -> str:
        item = self.get(item_id)
        return item.name if item else default


class ReferenceData:
    """
    Справочники поставщиков, складов и товаров для одной сессии списка или формы.
    Загружаются один раз (параллельно) и дальше только читаются.
    """

    def __init__(
        self,
        suppliers: Iterable[Supplier] = (),
        warehouses: Iterable[Warehouse] = (),
        products: Iterable[Product] = (),
    ):
        self.suppliers: LookupSet[Supplier] = LookupSet(suppliers)
        self.warehouses: LookupSet[Warehouse] = LookupSet(warehouses)
        self.products: LookupSet[Product] = LookupSet(products)

    @classmethod
    async def load(cls, gateway: "BackendGateway", include_products: bool = True) -> "ReferenceData":
        logger.debug(f"Loading reference data (products: {include_products}).")
        tasks = [gateway.list_suppliers(), gateway.list_warehouses()]
        if include_products:
            tasks.append(gateway.list_products())
        try:
            results = await asyncio.gather(*tasks)
        except Exception:
            logger.error("Error loading reference data.", exc_info=True)
            raise
        suppliers, warehouses = results[0], results[1]
        products = results[2] if include_products else []
        logger.info(f"Reference data loaded: {len(suppliers)} suppliers, {len(warehouses)} warehouses, {len(products)} products.")
        return cls(suppliers=suppliers, warehouses=warehouses, products=products)

    def supplier_name(self, supplier_id: Optional[RecordId], default: Optional[str] = None) -> str:
        return self.suppliers.name_of(supplier_id, default if default is not None else "Unknown Supplier")

    def warehouse_name(self, warehouse_id: Optional[RecordId], default: Optional[str] = None) -> str:
        return self.warehouses.name_of(warehouse_id, default if default is not None else "Unknown Warehouse")

    def product_name(self, product_id: Optional[RecordId], default: Optional[str] = None) -> str:
        return self.products.name_of(product_id, default if default is not None else "Unknown Product")
