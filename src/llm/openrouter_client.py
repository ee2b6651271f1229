"""OpenRouter client: chat completions using a manual list of model IDs (try in order, fallback on failure)."""

from dataclasses import dataclass

import httpx

from src.core.logger import logger
from src.observability import trace

OPENROUTER_BASE = "https://openrouter.ai/api/v1"


@dataclass
class LLMResponse:
    text: str
    model: str
    tokens_used: int = 0


class OpenRouterClient:

    def __init__(
        self,
        api_key: str,
        models: list[str] | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.models = [m for m in (models or []) if m] or ["openrouter/free"]
        self.api_key = (api_key or "").strip()
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.last_model_used: str | None = None

    def _should_retry(self, e: Exception) -> bool:
        if isinstance(e, httpx.HTTPStatusError):
            return e.response.status_code in (429, 500, 502, 503, 504)
        return True

    async def generate(
        self,
        prompt: str,
        max_tokens: int = 512,
        temperature: float = 0.2,
        stop: list[str] | None = None,
    ) -> LLMResponse:
        payload_base: dict = {
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if stop:
            payload_base["stop"] = stop
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        async with trace(
            "openrouter_generate",
            "llm",
            inputs={"models": self.models, "prompt_preview": prompt[-500:]},
            metadata={"provider": "openrouter"},
        ) as run:
            response = await self._generate_with_fallback(payload_base, headers, prompt)
            run.end(outputs={"text_preview": response.text[:500], "tokens_used": response.tokens_used})
            return response

    async def _generate_with_fallback(self, payload_base: dict, headers: dict, prompt: str) -> LLMResponse:
        last_error: Exception | None = None
        for model in self.models:
            logger.llm_request(model=model, prompt_preview=prompt[-200:])
            payload = {**payload_base, "model": model}
            try:
                response = await self.client.post(
                    f"{OPENROUTER_BASE}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                response.raise_for_status()
                data = response.json()
                self.last_model_used = data.get("model") or model
                choice = (data.get("choices") or [{}])[0]
                message = choice.get("message", {})
                generated_text = message.get("content", "") or ""
                tokens_used = (data.get("usage") or {}).get("total_tokens", 0)
                logger.llm_response(token_count=tokens_used, response_chars=len(generated_text))
                return LLMResponse(
                    text=generated_text,
                    model=self.last_model_used or model,
                    tokens_used=tokens_used,
                )
            except Exception as e:
                last_error = e
                if isinstance(e, httpx.HTTPStatusError):
                    body = e.response.text or ""
                    if body:
                        logger.warning(f"OpenRouter {model} {e.response.status_code}: {body[:300]}")
                    else:
                        logger.warning(f"OpenRouter {model} {e.response.status_code}")
                else:
                    logger.warning(f"OpenRouter {model} failed: {e}")
                if self._should_retry(e):
                    continue
                raise
        if last_error:
            raise last_error
        raise RuntimeError("No OpenRouter models configured")

    async def close(self):
        await self.client.aclose()
