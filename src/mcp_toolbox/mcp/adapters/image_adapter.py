"""Image generation through the Hugging Face inference router."""

import base64
import logging
from enum import Enum
from typing import Optional

import httpx

from mcp_toolbox.mcp.config import ImageProviderConfig
from mcp_toolbox.mcp.envelope import Annotations, ImageBlock
from mcp_toolbox.mcp.faults import MissingCredentialFault, UpstreamFault

logger = logging.getLogger(__name__)

CREDENTIAL_NAME = "HF_TOKEN"
IMAGE_MIME_TYPE = "image/png"
IMAGE_ANNOTATIONS = Annotations(audience=("user",), priority=0.9)

# Longest provider error body quoted back to the client
_MAX_ERROR_BODY = 300


class GenerationState(str, Enum):
    """Steps of a single image generation call."""
    CREDENTIAL_CHECK = "credential_check"
    REQUESTING = "requesting"
    DECODING = "decoding"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ImageGenerationAdapter:
    """
    Wraps one outbound text-to-image call.

    Single attempt, no retry. The wait for the provider is bounded by
    ``config.timeout_seconds``; a timeout is reported like any other
    provider failure.
    """

    def __init__(
        self,
        config: ImageProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def _enter(self, state: GenerationState, prompt: str) -> None:
        logger.debug("generate_image [%s] prompt=%r", state.value, prompt[:60])

    def _fail(self, fault: Exception, prompt: str) -> Exception:
        self._enter(GenerationState.FAILED, prompt)
        return fault

    async def generate(self, prompt: str) -> ImageBlock:
        """Generate one image for ``prompt``.

        Args:
            prompt: Text description of the image

        Returns:
            ImageBlock carrying the base64-encoded PNG

        Raises:
            MissingCredentialFault: If no API token is configured
            UpstreamFault: If the provider call fails or returns no image
        """
        self._enter(GenerationState.CREDENTIAL_CHECK, prompt)
        if not self.config.api_token:
            raise self._fail(MissingCredentialFault(CREDENTIAL_NAME), prompt)

        self._enter(GenerationState.REQUESTING, prompt)
        payload = await self._request(prompt)

        self._enter(GenerationState.DECODING, prompt)
        block = ImageBlock(
            data=base64.b64encode(payload).decode("ascii"),
            mime_type=IMAGE_MIME_TYPE,
            annotations=IMAGE_ANNOTATIONS,
        )
        self._enter(GenerationState.SUCCEEDED, prompt)
        return block

    async def _request(self, prompt: str) -> bytes:
        body = {
            "inputs": prompt,
            "parameters": {"num_inference_steps": self.config.steps},
        }
        headers = {
            "Authorization": f"Bearer {self.config.api_token}",
            "Accept": IMAGE_MIME_TYPE,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.config.endpoint, json=body, headers=headers)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise self._fail(
                UpstreamFault(
                    f"Image provider timed out after {self.config.timeout_seconds:g}s: {e}"
                ),
                prompt,
            ) from e
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:_MAX_ERROR_BODY]
            raise self._fail(
                UpstreamFault(
                    f"Image provider returned HTTP {e.response.status_code}: {detail}"
                ),
                prompt,
            ) from e
        except httpx.HTTPError as e:
            raise self._fail(UpstreamFault(f"Image provider request failed: {e}"), prompt) from e

        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            raise self._fail(
                UpstreamFault(
                    f"Image provider returned JSON instead of an image: "
                    f"{response.text[:_MAX_ERROR_BODY]}"
                ),
                prompt,
            )
        if not response.content:
            raise self._fail(UpstreamFault("Image provider returned an empty payload"), prompt)

        return response.content
