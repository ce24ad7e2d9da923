"""Vision model client backed by the OpenAI chat completions API."""

import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from commtrack.domain.errors import ScanError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"


class OpenAIVisionClient:
    """Sends a prompt and one image to an OpenAI-compatible chat endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        """Initialize the client.

        Args:
            api_key: API key for the endpoint
            model: Vision-capable model name
            base_url: Optional OpenAI-compatible endpoint, e.g. OpenRouter
            client: Optional preconfigured OpenAI client
        """
        self.model = model
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)

    def read_document(self, system_prompt: str, instruction: str, image_url: str) -> str:
        """Ask the model about one image and return its text reply.

        Raises:
            ScanError: If the request fails or the reply is empty
        """
        logger.debug("Sending scan request to %s", self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": instruction},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    },
                ],
                max_tokens=1000,
                temperature=0.1,
            )
        except OpenAIError as e:
            raise ScanError(f"Vision request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ScanError("Vision model returned no content")
        return response.choices[0].message.content
