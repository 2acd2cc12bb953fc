"""
Ollama text generation client.

Thin async wrapper over the Ollama `/api/generate` endpoint:
- one request per call, no retries (callers own the retry policy)
- per-call timeout, clamped by the caller's deadline
- transport, status and timeout errors surface as SynthesisInvocationFailed
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import httpx

from ..config.settings import get_settings
from ..core.errors import SynthesisInvocationFailed

logger = logging.getLogger(__name__)


@dataclass
class ModelResponse:
    """Structured response from LLM generation"""
    content: str
    model: str
    processing_time: float
    metadata: Dict[str, Any] = field(default_factory=dict)


class TextGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> ModelResponse: ...


class OllamaClient:
    """
    Generative model client for a local or remote Ollama server.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        settings=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cfg = settings or get_settings()
        self.base_url = (base_url or self.cfg.ollama_url).rstrip("/")
        self.model = model or self.cfg.llm_model
        self._transport = transport

    async def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> ModelResponse:
        """
        Generate text for a prompt.

        Args:
            prompt: Input prompt text
            temperature: Sampling temperature (defaults to LLM_TEMPERATURE)
            max_tokens: Maximum tokens to generate (defaults to LLM_MAX_TOKENS)
            timeout: Seconds before giving up (defaults to LLM_TIMEOUT_S)

        Returns:
            ModelResponse with the raw generated text
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.cfg.llm_temperature if temperature is None else temperature,
                "num_predict": max_tokens or self.cfg.llm_max_tokens,
            },
        }
        timeout = self.cfg.llm_timeout_s if timeout is None else timeout

        logger.debug(f"Generating with model {self.model}, prompt length: {len(prompt)}")
        start = time.time()
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout, connect=min(10.0, timeout)),
                transport=self._transport,
            ) as client:
                response = await client.post(f"{self.base_url}/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Ollama request timed out after {timeout}s")
            raise SynthesisInvocationFailed("Model request timed out", timed_out=True) from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama API error: {e.response.status_code} - {e.response.text[:300]}")
            raise SynthesisInvocationFailed(
                f"Model API error: {e.response.status_code}",
                detail=e.response.text[:300],
            ) from e
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Error calling Ollama: {e}")
            raise SynthesisInvocationFailed(f"Model request failed: {e}") from e

        content = data.get("response")
        if not isinstance(content, str):
            raise SynthesisInvocationFailed("Model returned no text")

        elapsed = time.time() - start
        logger.info(f"Model {self.model} answered in {elapsed:.2f}s ({len(content)} chars)")
        return ModelResponse(
            content=content,
            model=data.get("model", self.model),
            processing_time=elapsed,
            metadata={k: data[k] for k in ("eval_count", "prompt_eval_count") if k in data},
        )
