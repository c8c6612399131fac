"""Azure AI Foundry chat completions provider."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from foundrykit.capabilities import ModelInfo, infer_model_info
from foundrykit.errors import APIError
from foundrykit.models import EmbedResponse, Embedding
from foundrykit.providers._errors import wrap_provider_error
from foundrykit.providers.mock import MockChatClient
from foundrykit.request import build_chat_request
from foundrykit.response import assemble_response
from foundrykit.streaming import PROVIDER, assemble_stream

if TYPE_CHECKING:
    from foundrykit.config import Config
    from foundrykit.models import EmbedRequest, ModelRequest, ModelResponse
    from foundrykit.providers.base import ChatTransport, ChunkSink

log = logging.getLogger(__name__)


def _build_sdk_client(config: Config) -> Any:
    """Create the ``openai`` client pointed at the endpoint's v1 surface."""
    try:
        from openai import AsyncOpenAI
    except ImportError as e:
        raise APIError(
            "openai package not installed",
            hint="pip install openai",
        ) from e

    kwargs: dict[str, Any] = {
        "api_key": config.api_key,
        "base_url": config.base_url,
        "default_headers": {"api-key": config.api_key},
    }
    if config.api_version:
        kwargs["default_query"] = {"api-version": config.api_version}
    return AsyncOpenAI(**kwargs)


@dataclass(frozen=True)
class FoundryClient:
    """Immutable handle to one Foundry endpoint.

    Create it with :func:`connect`. Every call is independent; the handle holds
    no per-call state and can be shared across tasks.
    """

    config: Config
    sdk: ChatTransport

    async def generate(
        self,
        model: str,
        request: ModelRequest,
        *,
        on_chunk: ChunkSink | None = None,
    ) -> ModelResponse:
        """Generate one model turn.

        With *on_chunk*, the response is streamed and each text delta is passed
        to the sink as it arrives; otherwise a single completion is requested.

        Args:
            model: Deployment name on the endpoint.
            request: Messages, tools and sampling config.
            on_chunk: Optional streaming sink, plain or async. Raising from it
                aborts the call.

        Returns:
            The assembled model response.

        Raises:
            APIError: The transport failed (``StreamError`` mid-stream).
            StreamingCallbackError: The sink raised.
            ToolCallDecodeError: Streamed tool arguments could not be decoded.
        """
        params = build_chat_request(model, request)
        if on_chunk is None:
            completion = await self._create(model, params)
            return assemble_response(completion, request)

        stream = await self._create(model, {**params, "stream": True})
        return await assemble_stream(
            stream, on_chunk=on_chunk, model=model, request=request
        )

    async def _create(self, model: str, params: dict[str, Any]) -> Any:
        try:
            return await self.sdk.chat.completions.create(**params)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise wrap_provider_error(
                e,
                provider=PROVIDER,
                phase="generate",
                allow_network_errors=True,
                message=f"chat completion failed for model {model!r}",
                model=model,
            ) from e

    async def embed(self, model: str, request: EmbedRequest) -> EmbedResponse:
        """Embed each non-empty document with one request per document.

        Documents with no text are skipped, so the result can be shorter than
        the input.
        """
        embeddings: list[Embedding] = []
        for document in request.documents:
            text = document.text
            if not text:
                continue
            try:
                result = await self.sdk.embeddings.create(model=model, input=text)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                raise wrap_provider_error(
                    e,
                    provider=PROVIDER,
                    phase="embed",
                    allow_network_errors=True,
                    message=f"embedding generation failed for model {model!r}",
                    model=model,
                ) from e
            data = getattr(result, "data", None) or []
            if data:
                embeddings.append(Embedding(vector=[float(v) for v in data[0].embedding]))
        return EmbedResponse(embeddings=embeddings)

    def model_info(self, name: str, *, supports_vision: bool = False) -> ModelInfo:
        """Return inferred capabilities for a deployment name."""
        return infer_model_info(name, supports_vision=supports_vision)

    async def aclose(self) -> None:
        """Close underlying async client resources."""
        await self.sdk.close()


def connect(config: Config) -> FoundryClient:
    """Create a client handle for *config*.

    This is the only initialization step; there is no module-level client.
    """
    sdk: Any = MockChatClient() if config.use_mock else _build_sdk_client(config)
    log.debug("Connected to %s (mock=%s)", config.endpoint, config.use_mock)
    return FoundryClient(config=config, sdk=sdk)
