# purchase_sdk/controllers/scheduling.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger("purchase_sdk.controllers.scheduling")


class Debouncer:
    """
    Таймер с одним слотом: каждый trigger() отменяет ожидающий запуск и
    взводит новый. Колбэк вызывается только после `delay` секунд тишины.
    Нужен работающий event loop.
    """

    def __init__(self, delay: float, callback: Callable[[], Any]):
        self.delay = max(0.0, delay)
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire())

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _fire(self) -> None:
        await asyncio.sleep(self.delay)
        # Слот освобождаем до колбэка, чтобы колбэк мог взвести таймер заново
        self._task = None
        self._callback()

    async def wait(self) -> None:
        task = self._task
        if task is not None:
            await asyncio.wait({task})


class SingleFlight:
    """
    Планировщик "актуален только последний запрос".

    Каждый start() увеличивает токен и передает его в фабрику корутины.
    Результат имеет право попасть в состояние, только если is_current(token).
    Отмена вытесненной задачи - оптимизация (cancel_superseded), корректность
    обеспечивается проверкой токена.
    """

    def __init__(self, cancel_superseded: bool = True):
        self.cancel_superseded = cancel_superseded
        self.token = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, factory: Callable[[int], Awaitable[Any]]) -> asyncio.Task:
        self.token += 1
        token = self.token
        previous = self._task
        if self.cancel_superseded and previous is not None and not previous.done():
            logger.debug(f"Cancelling superseded task (new token {token}).")
            previous.cancel()
        self._task = asyncio.get_running_loop().create_task(factory(token))
        return self._task

    def is_current(self, token: int) -> bool:
        return token == self.token

    def cancel(self) -> None:
        # Поздние результаты после отмены тоже должны считаться устаревшими
        self.token += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
