"""Description: Materials-data analysis through OpenAI's Responses API."""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from models.errors import GatewayError
from models.session_models import GatewayResult
from services.openai.media_inputs import build_inputs
from services.openai.prompts import load_system_prompt
from services.openai.response_parser import extract_text, extract_usage
from utils.settings import Settings

ANALYSIS_FAILED_MESSAGE = "Failed to analyze the data. Please check your inputs and try again."


class AnalysisGateway:
    """Send notes and encoded figures to a hosted model and return its Markdown."""

    def __init__(self, client: AsyncOpenAI, settings: Optional[Settings] = None) -> None:
        """Initialize the gateway with an OpenAI async client and settings."""
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.settings = settings or Settings()
        self.system_prompt = load_system_prompt(self.settings.system_prompt_file)

    async def analyze(self, notes: str, images: Sequence[Dict[str, str]]) -> GatewayResult:
        """Analyze the figures with the notes as context.

        Args:
            notes: Free-text experimental context, may be empty.
            images: Ordered list of `{"base64", "mimeType"}` entries.

        Returns:
            A GatewayResult whose text is empty when the model produced nothing.

        Raises:
            GatewayError: If the request fails for any reason.
        """
        start_time = time.time()
        try:
            inputs = build_inputs(self.system_prompt, notes, images)
        except (KeyError, ValueError) as exc:
            logging.error("Could not build analysis request: %s", exc)
            raise GatewayError(ANALYSIS_FAILED_MESSAGE) from exc

        response = await self._create_response(inputs)
        latency = time.time() - start_time
        logging.info("Analysis latency: %.3fs (%d image(s))", latency, len(images))

        return GatewayResult(
            text=extract_text(response),
            usage=extract_usage(response),
            latency=latency,
        )

    async def _create_response(self, inputs: List[Dict[str, Any]]) -> Any:
        """Send the multimodal request to the OpenAI Responses API."""
        kwargs: Dict[str, Any] = {
            "model": self.settings.model,
            "input": inputs,
            "temperature": self.settings.temperature,
        }
        if self.settings.max_output_tokens:
            kwargs["max_output_tokens"] = self.settings.max_output_tokens

        try:
            return await self.client.responses.create(**kwargs)
        except Exception as exc:
            logging.error("Error during OpenAI Responses API call: %s", exc)
            raise GatewayError(ANALYSIS_FAILED_MESSAGE) from exc

# end of AnalysisGateway
