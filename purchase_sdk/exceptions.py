# purchase_sdk/exceptions.py
from enum import Enum
from typing import Any, List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from purchase_sdk.builders.validation import Violation


class PurchaseSDKError(Exception):
    """
    Базовый класс для всех пользовательских исключений, возникающих в purchase_sdk.
    Это позволяет ловить все ошибки SDK одним блоком except PurchaseSDKError, если нужно.
    """

    pass


class ConfigurationError(PurchaseSDKError):
    """
    Исключение, возникающее при ошибках конфигурации SDK или связанных компонентов.
    Например, если задан неизвестный режим пагинации.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"Configuration Error: {self.message}"


class NetworkError(PurchaseSDKError):
    """
    Ошибка связи с бэкендом: таймаут, сетевой сбой, неожиданный статус ответа
    или тело ответа, которое не удалось разобрать.
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, url: Optional[str] = None
    ):
        """
        :param message: Основное сообщение об ошибке.
        :param status_code: HTTP статус-код ответа, если применимо (например, 404, 500).
        :param url: URL, при обращении к которому произошла ошибка.
        """
        self.message = message
        self.status_code = status_code
        self.url = url
        full_message = "Network Error"
        if self.url:
            full_message += f" accessing {self.url}"
        if self.status_code:
            full_message += f" (Status Code: {self.status_code})"
        full_message += f": {self.message}"
        super().__init__(full_message)


class NotFoundError(PurchaseSDKError):
    """Запись с указанным ID не найдена на бэкенде."""

    def __init__(self, resource: str, item_id: Union[int, str]):
        self.resource = resource
        self.item_id = item_id
        super().__init__(f"{resource} with id {item_id} not found")


class ValidationError(PurchaseSDKError):
    """
    Клиентская ошибка валидации черновика заказа.
    Никогда не доходит до сети: выбрасывается до любого запроса к бэкенду.
    """

    def __init__(self, violations: List["Violation"], message: Optional[str] = None):
        self.violations = list(violations)
        if message is None:
            fields = ", ".join(v.field for v in self.violations) or "-"
            message = f"Validation failed for: {fields}"
        self.message = message
        super().__init__(message)

    def fields(self) -> List[str]:
        return [v.field for v in self.violations]


class ErrorKind(str, Enum):
    NETWORK = "network"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"


def error_kind_for(exc: Any) -> ErrorKind:
    """Сопоставляет исключение SDK с видом ошибки для состояния списка."""
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    return ErrorKind.NETWORK
