# purchase_sdk/config.py
import os
import logging
from typing import Annotated, List, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger("purchase_sdk.config")
CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(CONFIG_DIR, ".."))
ENV_FILE_PATH = os.path.join(PROJECT_ROOT, ".env")
ENV_TEST_FILE_PATH = os.path.join(PROJECT_ROOT, ".env.test")

_CURRENT_ENV = os.getenv("ENV", "prod").lower()
_EFFECTIVE_ENV_FILE_PATH = ENV_TEST_FILE_PATH if _CURRENT_ENV == "test" else ENV_FILE_PATH
logger.info("Current environment (ENV): %s for purchase_sdk", _CURRENT_ENV)
load_dotenv(_EFFECTIVE_ENV_FILE_PATH)

PAGINATION_MODES = ("server", "client")


class Settings(BaseSettings):
    PROJECT_NAME: str = "PurchaseOrderClient"
    ENV: str = Field(_CURRENT_ENV, description="Текущее окружение.")
    LOGGING_LEVEL: str = Field(
        "INFO",
        json_schema_extra={"examples": ["DEBUG", "INFO", "WARNING", "ERROR"]}
    )

    API_URL: str = Field("http://localhost:3000", description="Базовый URL REST бэкенда заказов.")
    REQUEST_TIMEOUT: float = Field(10.0, description="Таймаут HTTP запросов в секундах.")

    DEFAULT_PAGE_SIZE: int = Field(10, ge=1, description="Размер страницы списка по умолчанию.")
    FILTER_DEBOUNCE_MS: int = Field(
        400, ge=0, description="Окно тишины (мс) перед отправкой запроса после изменения фильтра."
    )
    PAGINATION_MODE: str = Field(
        "server",
        description="'server' - бэкенд режет страницы и отдает total; 'client' - полный список режется локально.",
    )

    DEFAULT_VAT_RATE: int = Field(15, description="Ставка НДС (%) для нового заказа.")
    # NoDecode: из env приходит строка "5,10,15,20", разбираем в валидаторе
    ALLOWED_VAT_RATES: Annotated[List[int], NoDecode] = Field(default_factory=lambda: [5, 10, 15, 20])

    model_config = SettingsConfigDict(
        env_file=_EFFECTIVE_ENV_FILE_PATH, env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @field_validator("PAGINATION_MODE")
    @classmethod
    def check_pagination_mode(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in PAGINATION_MODES:
            raise ValueError(f"PAGINATION_MODE must be one of {PAGINATION_MODES}, got '{v}'")
        return v

    @field_validator("ALLOWED_VAT_RATES", mode="before")
    @classmethod
    def assemble_vat_rates(cls, v: Union[str, List[int]]) -> List[int]:
        if isinstance(v, str):
            return [int(r.strip()) for r in v.split(",") if r.strip()]
        return v

    @property
    def filter_debounce_seconds(self) -> float:
        return self.FILTER_DEBOUNCE_MS / 1000.0


try:
    settings = Settings()
    logger.info("Settings loaded for %s (ENV='%s').", settings.PROJECT_NAME, settings.ENV)
except Exception as e:
    logger.critical("Failed to load purchase_sdk settings from '%s'.", _EFFECTIVE_ENV_FILE_PATH, exc_info=True)
    raise RuntimeError(f"Could not load purchase_sdk settings: {e}") from e
