"""
Политика задержек между повторами.

Backoff — экспоненциальная задержка с потолком и сбросом:
    seed → seed*m → seed*m² → ... → ceiling → ceiling → ...
    reset() возвращает к seed.

Не спит сам: задержку возвращает next_delay(), а ждёт вызывающий код
(через переданную функцию sleep), поэтому политику можно тестировать
без реальных таймеров.
"""

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class Backoff:
    """Экспоненциальная задержка: seed, множитель, потолок, сброс"""

    def __init__(self, seed: float, multiplier: float = 2.0, ceiling: float = 60.0, jitter: float = 0.0):
        """
        Args:
            seed: первая задержка (секунды)
            multiplier: во сколько раз растёт задержка после каждого повтора
            ceiling: максимальная задержка
            jitter: доля случайного разброса (0.2 → ±20%), 0 — без разброса
        """
        if seed <= 0 or multiplier < 1 or ceiling < seed:
            raise ValueError("backoff requires 0 < seed <= ceiling and multiplier >= 1")
        self.seed = seed
        self.multiplier = multiplier
        self.ceiling = ceiling
        self.jitter = jitter
        self._current = seed

    @property
    def current(self) -> float:
        """Задержка, которую вернёт следующий next_delay() (без разброса)"""
        return self._current

    def next_delay(self) -> float:
        delay = self._current
        self._current = min(self._current * self.multiplier, self.ceiling)
        if self.jitter:
            delay *= random.uniform(1 - self.jitter, 1 + self.jitter)
        return delay

    def reset(self) -> None:
        self._current = self.seed


async def retry_async(
    func: Callable[[], Awaitable[T]],
    attempts: int,
    backoff: Backoff,
    sleep: Sleep = asyncio.sleep,
    description: str = "operation",
) -> T:
    """Повторяет асинхронный вызов с задержками из backoff

    Args:
        func: функция без аргументов, возвращающая корутину
        attempts: общее число попыток (включая первую)
        backoff: политика задержек
        sleep: функция ожидания (подменяется в тестах)
        description: название операции для логов

    Returns:
        Результат первого успешного вызова

    Raises:
        Исключение последней попытки, если все попытки неудачны
    """
    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except Exception as e:
            if attempt == attempts:
                logger.error(f"{description} failed after {attempts} attempts: {e}")
                raise
            delay = backoff.next_delay()
            logger.warning(
                f"{description} failed (attempt {attempt}/{attempts}): {e}, retrying in {delay:.1f}s"
            )
            await sleep(delay)
    raise ValueError("attempts must be positive")
