# purchase_sdk/clients/base.py
import logging
import httpx
from typing import Type, TypeVar, List, Optional, Generic, Any, Dict, Mapping, Tuple
from pydantic import BaseModel as PydanticBaseModel, ValidationError as PydanticValidationError

from purchase_sdk.exceptions import NetworkError
from purchase_sdk.schemas.base import RecordId

logger = logging.getLogger("purchase_sdk.clients.base")

# ModelType_client - то, во что клиент парсит одиночный объект из ответа
ModelType_client = TypeVar("ModelType_client", bound=PydanticBaseModel)

TOTAL_COUNT_HEADER = "X-Total-Count"


class RemoteServiceClient(Generic[ModelType_client]):
    """
    Базовый HTTP-клиент для одного REST ресурса бэкенда (например, /purchaseOrders).
    Все сбои транспорта и разбора ответа превращаются в NetworkError.
    """

    def __init__(
        self,
        base_url: str,
        model_endpoint: str,
        model_cls: Type[ModelType_client],
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url_str = str(base_url).rstrip("/")
        self.model_endpoint_path = model_endpoint.strip("/")
        self.parsing_model_cls = model_cls
        self.api_base_url = f"{self.base_url_str}/{self.model_endpoint_path}"

        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None
        logger.debug(f"RemoteServiceClient initialized for API base: {self.api_base_url}. Owns client: {self._owns_client}")

    async def _request(
        self,
        method: str,
        url: str,
        allowed_statuses: Optional[List[int]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = dict(kwargs.pop("headers", {}))
        if "json" in kwargs and "Content-Type" not in headers:
            headers["Content-Type"] = "application/json"
        logger.debug(f"Executing remote call: {method} {url}, Params: {kwargs.get('params')}, Data: {kwargs.get('json')}")
        try:
            response = await self._http_client.request(method, url, headers=headers, **kwargs)
            effective_allowed_statuses = allowed_statuses if allowed_statuses is not None else [200, 201, 204]
            if response.status_code not in effective_allowed_statuses:
                logger.warning(f"Remote call to {url} returned unexpected status: {response.status_code}. Allowed: {effective_allowed_statuses}. Response text: {response.text[:500]}")
                response.raise_for_status()
                # 2xx/3xx вне списка разрешенных raise_for_status не бросает
                raise NetworkError(f"Unexpected status {response.status_code}", status_code=response.status_code, url=url)
            logger.debug(f"Remote call to {url} successful. Status: {response.status_code}")
            return response
        except httpx.TimeoutException as e:
            raise NetworkError(f"Timeout error accessing {url}: {e!s}", url=url) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Network error accessing {url}: {e!s}", url=url) from e
        except httpx.HTTPStatusError as e:
            detail_message = e.response.text
            try:
                error_json = e.response.json()
                if isinstance(error_json, dict) and "detail" in error_json:
                    detail_message = error_json["detail"]
            except ValueError:
                pass
            raise NetworkError(f"Service responded with error: {detail_message}", status_code=e.response.status_code, url=url) from e

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Response is not valid JSON: {e!s}", status_code=response.status_code, url=str(response.url)) from e

    def _parse(self, data: Any, url: str) -> ModelType_client:
        try:
            return self.parsing_model_cls.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Failed to parse {self.parsing_model_cls.__name__} from {url}: {e}")
            raise NetworkError(f"Invalid {self.parsing_model_cls.__name__} payload: {e.error_count()} error(s)", url=url) from e

    def _parse_many(self, items_data: Any, url: str) -> List[ModelType_client]:
        if not isinstance(items_data, list):
            logger.error(f"Invalid list payload from {url}: expected list, got {type(items_data)}")
            raise NetworkError("Invalid list response format: expected a JSON array", url=url)
        return [self._parse(item_data, url) for item_data in items_data]

    @staticmethod
    def _payload(data: Any) -> Dict[str, Any]:
        if hasattr(data, "to_payload"):
            return data.to_payload()
        if isinstance(data, PydanticBaseModel):
            return data.model_dump(mode="json", by_alias=True, exclude_none=True)
        return dict(data)

    async def get(self, item_id: RecordId) -> Optional[ModelType_client]:
        url = f"{self.api_base_url}/{item_id}"
        logger.info(f"Client GET: Fetching item with ID {item_id} from {url}")
        response = await self._request("GET", url, allowed_statuses=[200, 404])
        if response.status_code == 404:
            return None
        return self._parse(self._json(response), url)

    async def list_page(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Tuple[List[ModelType_client], Optional[int]]:
        """
        Запрашивает одну страницу. Возвращает (записи, total) где total берется
        из заголовка X-Total-Count, либо из конверта json-server 1.x
        {"data": [...], "items": N}. Если total узнать неоткуда - None.
        """
        url = self.api_base_url
        logger.info(f"Client LIST: Fetching page from {url} with params: {dict(params or {})}")
        response = await self._request("GET", url, params=dict(params or {}), allowed_statuses=[200])
        body = self._json(response)

        total: Optional[int] = None
        header_value = response.headers.get(TOTAL_COUNT_HEADER)
        if header_value is not None:
            try:
                total = int(header_value)
            except ValueError:
                logger.warning(f"Ignoring non-integer {TOTAL_COUNT_HEADER} header from {url}: '{header_value}'")

        if isinstance(body, dict) and "data" in body:
            items_data = body["data"]
            envelope_total = body.get("items")
            if isinstance(envelope_total, int) and not isinstance(envelope_total, bool):
                total = envelope_total
        else:
            items_data = body

        if total is not None and total < 0:
            logger.error(f"Negative total count {total} received from {url}")
            raise NetworkError(f"Invalid total count: {total}", status_code=response.status_code, url=url)

        return self._parse_many(items_data, url), total

    async def list_all(self, params: Optional[Mapping[str, Any]] = None) -> List[ModelType_client]:
        url = self.api_base_url
        logger.info(f"Client LIST: Fetching all from {url} with params: {dict(params or {})}")
        response = await self._request("GET", url, params=dict(params or {}), allowed_statuses=[200])
        return self._parse_many(self._json(response), url)

    async def create(self, data: Any) -> ModelType_client:
        url = self.api_base_url
        json_data = self._payload(data)
        logger.info(f"Client CREATE: Posting to {url} with data: {json_data}")
        response = await self._request("POST", url, json=json_data, allowed_statuses=[200, 201])
        return self._parse(self._json(response), url)

    async def update(self, item_id: RecordId, data: Any) -> ModelType_client:
        url = f"{self.api_base_url}/{item_id}"
        json_data = self._payload(data)
        logger.info(f"Client UPDATE: Putting to {url} for ID {item_id} with data: {json_data}")
        response = await self._request("PUT", url, json=json_data, allowed_statuses=[200])
        return self._parse(self._json(response), url)

    async def delete(self, item_id: RecordId) -> bool:
        url = f"{self.api_base_url}/{item_id}"
        logger.info(f"Client DELETE: Deleting item {item_id} at {url}")
        await self._request("DELETE", url, allowed_statuses=[200, 204])
        return True

    async def close(self) -> None:
        if self._owns_client and self._http_client:
            logger.info(f"Closing owned HTTP client for {self.api_base_url}")
            await self._http_client.aclose()
        elif not self._owns_client:
            logger.debug(f"HTTP client for {self.api_base_url} is managed externally, not closing.")
