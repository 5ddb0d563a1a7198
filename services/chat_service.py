"""
Chat service forwarding conversations to the OpenAI chat completions API
"""
import time
from typing import Any, Dict, List, Optional

import httpx

from utils.errors import UpstreamError
from utils.logger_factory import new_logger

log = new_logger("chat_service")

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"

# Generation parameters are fixed for every caller
CHAT_MODEL = "gpt-3.5-turbo"
CHAT_TEMPERATURE = 0.8
CHAT_MAX_TOKENS = 150

DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


class ChatService:
    """Relays chat completion requests to OpenAI"""

    def __init__(
        self,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.transport = transport
        self.timeout = timeout

    def build_payload(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "model": CHAT_MODEL,
            "messages": messages,
            "temperature": CHAT_TEMPERATURE,
            "max_tokens": CHAT_MAX_TOKENS,
        }

    async def complete(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Send `messages` unchanged to OpenAI and return the response JSON as is.

        Raises:
            UpstreamError: transport failure, non-2xx status or a body that is not JSON
        """
        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    OPENAI_CHAT_COMPLETIONS_URL,
                    headers={
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {self.api_key}",
                    },
                    json=self.build_payload(messages),
                )
        except httpx.HTTPError as e:
            log.error(f"OpenAI request failed: {e!r}")
            raise UpstreamError(f"OpenAI request failed: {e}") from e

        request_time = (time.time() - start_time) * 1000
        log.info(f"OpenAI API request completed in {request_time:.2f}ms, status: {response.status_code}")

        if response.is_error:
            error_text = response.text[:500]
            log.error(f"OpenAI API error: {response.status_code} - {error_text}")
            raise UpstreamError("OpenAI API returned an error", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            log.error(f"OpenAI response is not valid JSON: {response.text[:500]}")
            raise UpstreamError("OpenAI response is not valid JSON", status_code=response.status_code) from e

        usage = data.get("usage") if isinstance(data, dict) else None
        if usage:
            log.info(
                f"OpenAI API Usage - prompt_tokens: {usage.get('prompt_tokens', 0)}, "
                f"completion_tokens: {usage.get('completion_tokens', 0)}, "
                f"total_tokens: {usage.get('total_tokens', 0)}"
            )
        return data
