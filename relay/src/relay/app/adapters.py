"""Endpoint adapters mapping the public API onto upstream model payloads.

Each route is one `EndpointAdapter` parameterized by two closed variants:

- `InboundShape`: a single `message` string, or a `question`/`context` pair.
- `UnwrapRule`: the provider answers with a list whose first element holds the
  text, or with a single object holding it directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from relay.app.config import RelayConfig
from relay.app.errors import ClientInputError, UpstreamError
from relay.app.schemas import (
    AnswerResponse,
    GenerationResponse,
    MessageRequest,
    QuestionRequest,
    SummarizeResponse,
)
from relay.app.upstream import UpstreamInvoker


class InboundShape(str, Enum):
    """Supported inbound body shapes."""

    SINGLE_MESSAGE = "single_message"
    QA_PAIR = "qa_pair"


class UnwrapRule(str, Enum):
    """How the text field is located in the upstream result."""

    FIRST_OF_SEQUENCE = "first_of_sequence"
    DIRECT = "direct"


_REQUEST_MODELS: dict[InboundShape, type[BaseModel]] = {
    InboundShape.SINGLE_MESSAGE: MessageRequest,
    InboundShape.QA_PAIR: QuestionRequest,
}


@dataclass(frozen=True)
class EndpointAdapter:
    """Mapping between one relay route and one upstream model."""

    name: str
    model: str
    inbound: InboundShape
    unwrap: UnwrapRule
    field: str
    response_model: type[BaseModel]

    @property
    def path(self) -> str:
        return f"/{self.name}"

    @property
    def request_model(self) -> type[BaseModel]:
        return _REQUEST_MODELS[self.inbound]

    def parse_body(self, raw: bytes) -> BaseModel:
        """Validate a raw request body as JSON, whatever its declared Content-Type."""

        try:
            return self.request_model.model_validate_json(raw)
        except ValidationError as exc:
            raise ClientInputError(f"{self.name}: invalid request body") from exc

    def build_payload(self, request: BaseModel) -> dict[str, Any]:
        """Build the upstream JSON body from a validated inbound model."""

        if self.inbound is InboundShape.QA_PAIR:
            if not isinstance(request, QuestionRequest):
                raise ClientInputError(f"{self.name} expects question and context")
            return {"inputs": {"question": request.question, "context": request.context}}

        if not isinstance(request, MessageRequest):
            raise ClientInputError(f"{self.name} expects a message")
        return {"inputs": request.message}

    def unwrap_result(self, result: Any) -> str:
        """Extract the text field from a decoded upstream result."""

        if self.unwrap is UnwrapRule.FIRST_OF_SEQUENCE:
            if not isinstance(result, list):
                raise UpstreamError(f"{self.name}: expected a JSON array from upstream")
            if not result:
                raise UpstreamError(f"{self.name}: upstream returned an empty array")
            item = result[0]
        else:
            item = result

        if not isinstance(item, dict):
            raise UpstreamError(f"{self.name}: expected a JSON object from upstream")
        text = item.get(self.field)
        if not isinstance(text, str):
            raise UpstreamError(f"{self.name}: upstream result missing string '{self.field}'")
        return text

    def render(self, text: str) -> dict[str, Any]:
        return self.response_model.model_validate({self.field: text}).model_dump()

    def handle(
        self,
        request: BaseModel,
        *,
        invoker: UpstreamInvoker,
        config: RelayConfig,
    ) -> dict[str, Any]:
        """Run one request through payload build, upstream call and unwrap."""

        payload = self.build_payload(request)
        result = invoker.invoke(self.model, payload, token=config.hf_token)
        return self.render(self.unwrap_result(result))


GENERATE = EndpointAdapter(
    name="generate",
    model="EleutherAI/gpt-j-6B",
    inbound=InboundShape.SINGLE_MESSAGE,
    unwrap=UnwrapRule.FIRST_OF_SEQUENCE,
    field="generated_text",
    response_model=GenerationResponse,
)

ANSWER = EndpointAdapter(
    name="answer",
    model="deepset/roberta-base-squad2",
    inbound=InboundShape.QA_PAIR,
    unwrap=UnwrapRule.DIRECT,
    field="answer",
    response_model=AnswerResponse,
)

HEADLINE = EndpointAdapter(
    name="headline",
    model="Michau/t5-base-en-generate-headline",
    inbound=InboundShape.SINGLE_MESSAGE,
    unwrap=UnwrapRule.FIRST_OF_SEQUENCE,
    field="generated_text",
    response_model=GenerationResponse,
)

SUMMARIZE = EndpointAdapter(
    name="summarize",
    model="facebook/bart-large-cnn",
    inbound=InboundShape.SINGLE_MESSAGE,
    unwrap=UnwrapRule.FIRST_OF_SEQUENCE,
    field="summary_text",
    response_model=SummarizeResponse,
)

ADAPTERS: dict[str, EndpointAdapter] = {
    adapter.name: adapter for adapter in (GENERATE, ANSWER, HEADLINE, SUMMARIZE)
}
