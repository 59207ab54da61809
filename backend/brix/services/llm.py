import inspect
from typing import Optional

from openai import AsyncOpenAI

from ..config import Settings, load_settings, DEFAULT_SYSTEM_PROMPT
from ..utils import retry_async


class ModelClient:
    """Single-shot completions against an OpenAI-compatible provider."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise RuntimeError("OPENAI_API_KEY not configured")
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
            )
        return self._client

    def system_prompt(self) -> str:
        prompts = self.settings.prompts or {}
        return prompts.get("system", {}).get("site_builder") or DEFAULT_SYSTEM_PROMPT

    async def complete(self, prompt: str, *, temperature: float = 0.7, max_tokens: Optional[int] = None) -> str:
        settings = self.settings
        client = self.client

        async def _create():
            result = client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": self.system_prompt()},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens or settings.openai_max_tokens,
            )
            if inspect.isawaitable(result):
                return await result
            return result

        resp = await retry_async(
            _create,
            attempts=settings.retry_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            label=f"model call ({settings.openai_model})",
        )
        return resp.choices[0].message.content or ""
