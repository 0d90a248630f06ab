#!/usr/bin/env python3
"""
OpenAI integration for lesson composition.

Sends chat completion requests with a JSON schema response format so the
model returns a single structured lesson object.
"""

import logging
from typing import List, Dict, Optional, Any

from openai import OpenAI

from core.exceptions import CompositionError

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Client for OpenAI API integration with structured outputs."""

    def __init__(self,
                 api_key: str,
                 model: str = "gpt-4o-mini",
                 max_tokens: int = 2000,
                 temperature: float = 0.6,
                 client: Optional[Any] = None):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            max_tokens: Completion token limit
            temperature: Sampling temperature
            client: Pre-built OpenAI client (tests pass a stub)
        """
        if not api_key and client is None:
            raise ValueError("OpenAI API key not provided")

        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def complete_structured(self, messages: List[Dict[str, str]], schema: Dict[str, Any], schema_name: str = "lesson") -> str:
        """
        Make a structured request with JSON schema enforcement.

        Args:
            messages: Chat messages (system + user)
            schema: JSON schema the response must follow
            schema_name: Name reported to the API for the schema

        Returns:
            Raw JSON text of the model's answer

        Raises:
            CompositionError: If the request fails or the answer is truncated or empty
        """
        logger.info(f"Making OpenAI structured API call for {schema_name}")
        for i, msg in enumerate(messages):
            content = msg.get('content', '')
            if len(content) > 1000:
                content = content[:500] + "\n...\n" + content[-500:]
            logger.debug(f"Message {i+1} [{msg.get('role', 'unknown').upper()}]:\n{content}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": f"{schema_name}_response",
                        "schema": schema,
                        "strict": True
                    }
                }
            )
        except Exception as e:
            logger.error(f"OpenAI structured API request failed: {e}")
            raise CompositionError("openai", self.model, e) from e

        choice = response.choices[0]
        if getattr(choice, "finish_reason", None) == "length":
            logger.error(f"OpenAI response for {schema_name} was truncated at max_tokens={self.max_tokens}")
            raise CompositionError("openai", self.model, ValueError("response truncated (finish_reason=length)"))

        content = choice.message.content
        if not content:
            refusal = getattr(choice.message, "refusal", None)
            raise CompositionError("openai", self.model, ValueError(refusal or "empty response"))

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(
                f"OpenAI API call successful - tokens: {usage.prompt_tokens} prompt + "
                f"{usage.completion_tokens} completion = {usage.total_tokens} total"
            )
        logger.debug(f"=== LLM OUTPUT RESPONSE ===\n{content}")
        return content
