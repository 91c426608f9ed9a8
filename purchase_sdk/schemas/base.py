# purchase_sdk/schemas/base.py
from decimal import Decimal
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# json-server и похожие бэкенды отдают id либо числом, либо строкой
RecordId = Union[int, str]

# Денежные значения держим в Decimal, а в JSON отдаем числами
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class BaseSchema(BaseModel):
    """
    Базовая Pydantic схема для всех сущностей бэкенда.
    На проводе поля в camelCase (poNumber, supplierId), в Python - snake_case.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[RecordId] = Field(
        default=None,
        description="Идентификатор записи, назначается бэкендом"
    )

    def to_payload(self, **kwargs) -> dict:
        """Сериализует схему в JSON-совместимый словарь с camelCase ключами."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)
