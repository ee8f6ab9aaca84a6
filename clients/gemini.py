"""
Клиент для работы с Gemini API.

GeminiClient - асинхронный клиент генерации текста через REST API Gemini.
Используется для:
- ответов на упоминания и ответы боту
- генерации квизов (JSON)
- пересказа истории чата
"""

import asyncio
from typing import Optional

import aiohttp

from config import get_logger, GEMINI_API_KEY, GEMINI_MODEL, GEMINI_URL

logger = get_logger(__name__)


class GeminiClient:
    """Клиент для работы с Gemini API"""

    def __init__(self, api_key: str = GEMINI_API_KEY, model: str = GEMINI_MODEL):
        self.api_key = api_key
        self.model = model
        self.base_url = f"{GEMINI_URL}/{model}:generateContent"

    async def generate(self, prompt: str, timeout: float) -> Optional[str]:
        """Генерация текста по промпту

        Args:
            prompt: текст запроса
            timeout: общий таймаут запроса (секунды)

        Returns:
            Сгенерированный текст или None при ошибке/таймауте/битом ответе
            (исключения наружу не выходят)
        """
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}]
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.base_url,
                    headers=headers,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=timeout)
                ) as resp:
                    if resp.status != 200:
                        error = await resp.text()
                        logger.error(f"Gemini HTTP error {resp.status}: {error}")
                        return None
                    data = await resp.json()
        except asyncio.TimeoutError:
            logger.error(f"Gemini request timeout after {timeout}s")
            return None
        except aiohttp.ClientError as e:
            logger.error(f"Gemini request failed: {e}")
            return None
        except Exception as e:
            # например, тело 200-ответа не JSON
            logger.error(f"Gemini API exception: {e!r}")
            return None

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: dict) -> Optional[str]:
        """Текст первого кандидата (все части подряд)"""
        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError):
            logger.error(f"Gemini returned no candidates: {str(data)[:500]}")
            return None
        return text or None
