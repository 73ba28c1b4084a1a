import json
import logging
from typing import Dict, Any, Optional
from groq import Groq
from procurement_intake.config import settings

logger = logging.getLogger(__name__)

class LLMExtractionError(Exception):
    """The model returned nothing usable."""

class GroqLLMTool:
    def __init__(self):
        self._client: Optional[Groq] = None
        self.model = settings.GROQ_MODEL
        self.temperature = settings.LLM_TEMPERATURE

    @property
    def client(self) -> Groq:
        # Groq() refuses to build without an API key, so defer it to first use
        if self._client is None:
            self._client = Groq(api_key=settings.GROQ_API_KEY)
        return self._client

    def generate_structured(self, instructions: str, prompt: str) -> Dict[str, Any]:
        """
        Run a chat completion in JSON mode and decode the returned object.
        """
        messages = [
            {"role": "system", "content": instructions},
            {"role": "user", "content": prompt}
        ]

        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                response_format={"type": "json_object"}
            )
        except Exception as e:
            logger.error(f"LLM generation failed: {e}")
            raise

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise LLMExtractionError("Empty response from model")

        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Model returned invalid JSON: {e}")
            raise LLMExtractionError(f"Model returned invalid JSON: {e}") from e

        if not isinstance(result, dict):
            raise LLMExtractionError("Model did not return a JSON object")
        return result

groq_tool = GroqLLMTool()
