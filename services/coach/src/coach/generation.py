from __future__ import annotations

from typing import Protocol

import openai

from coach.errors import GenerationInvocationError
from coach.prompt import GenerationRequest


class GenerationClient(Protocol):
    async def generate(self, request: GenerationRequest) -> str: ...


class OpenAIGenerationClient:
    """Schema-constrained generation through the OpenAI Responses API."""

    def __init__(self, *, api_key: str, model: str) -> None:
        self.model = model
        self._client = openai.AsyncOpenAI(api_key=api_key, max_retries=0)

    async def generate(self, request: GenerationRequest) -> str:
        try:
            response = await self._client.responses.create(
                model=self.model,
                input=[
                    {"role": "system", "content": request.instructions},
                    {"role": "user", "content": request.user_message()},
                ],
                text={"format": request.schema_format},
            )
        except openai.OpenAIError as exc:
            raise GenerationInvocationError(str(exc)) from exc
        return response.output_text

    async def aclose(self) -> None:
        await self._client.close()
