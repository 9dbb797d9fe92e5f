"""Relay orchestration: parse, build, execute, translate."""

from typing import Any, Protocol
from uuid import uuid4

import httpx
from fastapi import Response

from core.builder import RequestBuilder
from core.config import Config, RelayMode
from core.intent import parse_intent
from core.protocols import RequestLogger
from core.request_types import BodyMode
from services.transport import TransportExecutor
from services.translator import EnvelopeTranslator, PassthroughTranslator


class ResponseTranslator(Protocol):
    async def translate(self, response: httpx.Response) -> Response: ...


class RelayService:
    """Run one relay transaction per call; holds no per-request state."""

    def __init__(
        self,
        logger: RequestLogger,
        body_mode: BodyMode,
        builder: RequestBuilder,
        executor: TransportExecutor,
        translator: ResponseTranslator,
    ) -> None:
        self._logger = logger
        self._body_mode = body_mode
        self._builder = builder
        self._executor = executor
        self._translator = translator

    @classmethod
    def from_config(
        cls,
        config: Config,
        logger: RequestLogger,
        client: httpx.AsyncClient,
    ) -> "RelayService":
        """Wire the components for the configured relay mode."""
        if config.relay.mode is RelayMode.PASSTHROUGH:
            body_mode = BodyMode.JSON
            translator: ResponseTranslator = PassthroughTranslator(logger, config.relay.mode.value)
        else:
            body_mode = BodyMode.RAW
            translator = EnvelopeTranslator()
        return cls(
            logger=logger,
            body_mode=body_mode,
            builder=RequestBuilder(client, body_mode),
            executor=TransportExecutor(client),
            translator=translator,
        )

    async def relay(self, payload: Any) -> Response:
        """Relay the call described by ``payload``.

        Any failure raises a RelayError subclass and the later stages never run.
        """
        intent = parse_intent(payload, self._body_mode)
        request = self._builder.build(intent)

        relay_id = uuid4().hex
        self._logger.log_relay(relay_id, intent.method, intent.target_url, intent.headers)
        response = await self._executor.send(request, stream=True)
        self._logger.log_outcome(relay_id, intent.method, intent.target_url, response.status_code)

        return await self._translator.translate(response)
