import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from paralegal import config
from paralegal.core.errors import (
    AIServiceError,
    CompletionAPIError,
    InvalidResponseError,
    NotConfiguredError,
)
from paralegal.core.stream_decoder import StreamDecoder
from paralegal.models.settings import Settings

# Configure logging
logger = logging.getLogger("llm_service")

# A user prompt is plain text, or a list of content parts (text + image_url) for vision requests
UserContent = Union[str, List[Dict[str, Any]]]


@dataclass
class StreamDelta:
    """One item delivered to a streaming caller: a text fragment, or a terminal error."""
    text: str = ""
    error: Optional[AIServiceError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


DeltaCallback = Callable[[StreamDelta], None]


class CompletionClient:
    """
    Client for the chat completion endpoint.
    Issues exactly one HTTP request per call and never touches case-file or message state.
    """

    def __init__(
        self,
        settings: Settings,
        model_name: str = config.model_name,
        base_url: str = config.api_base_url,
        default_api_key: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the completion client.

        Args:
            settings: Shared user settings; the API key is read from it on every call
            model_name: The name of the model to use for generation
            base_url: Base URL of the OpenAI-compatible API
            default_api_key: Key used when the settings hold none (e.g. from the environment)
            http_client: Optional httpx client, mainly to plug in a custom transport
        """
        self.settings = settings
        self.model_name = model_name
        self.base_url = base_url
        self.default_api_key = default_api_key
        self.http_client = http_client
        self._client: Optional[AsyncOpenAI] = None
        self._client_key: Optional[str] = None
        logger.info(f"🔄 INITIALIZED COMPLETION CLIENT: model={model_name}, base_url={base_url}")

    def _get_api_key(self) -> str:
        return (self.settings.api_key or self.default_api_key or "").strip()

    def is_configured(self) -> bool:
        return bool(self._get_api_key())

    def _get_client(self) -> AsyncOpenAI:
        api_key = self._get_api_key()
        if not api_key:
            raise NotConfiguredError()

        # The key can change at runtime through the settings
        if self._client is None or self._client_key != api_key:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self.base_url,
                http_client=self.http_client,
                max_retries=0,
            )
            self._client_key = api_key
        return self._client

    @staticmethod
    def _build_messages(system_prompt: str, user_prompt: UserContent) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    @staticmethod
    def _classify_status_error(error: APIStatusError) -> CompletionAPIError:
        """
        Turn a non-success response into a readable error.

        The message comes from the structured error body when there is one
        (``{"error": {"message": ...}}``), otherwise from the status line.
        """
        status_code = error.status_code
        message = None

        body = error.body
        if isinstance(body, dict):
            nested = body.get("error")
            if isinstance(nested, dict):
                body = nested
            for key in ("message", "detail"):
                value = body.get(key)
                if isinstance(value, str) and value.strip():
                    message = value.strip()
                    break

        if not message:
            message = f"API request failed with status {status_code} {error.response.reason_phrase}".strip()

        return CompletionAPIError(message, status_code=status_code)

    async def send_once(
        self,
        system_prompt: str,
        user_prompt: UserContent,
        json_mode: bool = False,
        model_name: Optional[str] = None,
    ) -> str:
        """
        Generate a complete response in a single non-streamed request.

        Args:
            system_prompt: Fixed task instructions
            user_prompt: The user message, usually including the case context
            json_mode: Ask the endpoint for a JSON object response
            model_name: Override for the configured model

        Returns:
            Generated text response

        Raises:
            NotConfiguredError: No API key is configured; nothing was sent
            CompletionAPIError: The endpoint answered with an error or was unreachable
            InvalidResponseError: The response carried no content
        """
        client = self._get_client()
        model = model_name or self.model_name

        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info(f"🔄 GENERATING RESPONSE: model={model}, json_mode={json_mode}")
        try:
            completion = await client.chat.completions.create(
                model=model,
                messages=self._build_messages(system_prompt, user_prompt),
                stream=False,
                **kwargs,
            )
        except APIStatusError as e:
            classified = self._classify_status_error(e)
            logger.error(f"❌ COMPLETION API ERROR: status={classified.status_code}, message={classified.message}")
            raise classified from e
        except APIConnectionError as e:
            logger.error(f"❌ COMPLETION API UNREACHABLE: {str(e)}")
            raise CompletionAPIError(f"Could not reach the completion endpoint: {str(e)}") from e
        except httpx.HTTPError as e:
            logger.error(f"❌ COMPLETION TRANSPORT ERROR: {str(e)}")
            raise CompletionAPIError(f"Connection to the completion endpoint failed: {str(e)}") from e

        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        if content is None:
            logger.error("❌ EMPTY COMPLETION RESPONSE")
            raise InvalidResponseError("The completion endpoint returned no content.")

        logger.info(f"✅ RESPONSE GENERATED: length={len(content)}")
        return content

    async def send_stream(
        self,
        system_prompt: str,
        user_prompt: UserContent,
        on_delta: DeltaCallback,
        model_name: Optional[str] = None,
    ) -> None:
        """
        Generate a response as a stream, pushing each text delta to ``on_delta`` in arrival order.

        A missing API key is not raised: it is delivered as one synthetic delta
        carrying the error, so the consuming loop sees it like any other item.

        Args:
            system_prompt: Fixed task instructions
            user_prompt: The user message, or content parts for a vision request
            on_delta: Called once per delta
            model_name: Override for the configured model

        Raises:
            CompletionAPIError: The endpoint answered with an error or was unreachable
        """
        try:
            client = self._get_client()
        except NotConfiguredError as e:
            logger.error(f"❌ STREAM NOT STARTED: {e.message}")
            on_delta(StreamDelta(error=e))
            return

        model = model_name or self.model_name
        decoder = StreamDecoder()
        delta_count = 0

        logger.info(f"🔄 STREAMING RESPONSE: model={model}")
        try:
            async with client.chat.completions.with_streaming_response.create(
                model=model,
                messages=self._build_messages(system_prompt, user_prompt),
                stream=True,
            ) as response:
                async for chunk in response.iter_bytes():
                    for text in decoder.feed(chunk):
                        delta_count += 1
                        on_delta(StreamDelta(text=text))
                    if decoder.done:
                        break
            for text in decoder.finish():
                delta_count += 1
                on_delta(StreamDelta(text=text))
        except APIStatusError as e:
            classified = self._classify_status_error(e)
            logger.error(f"❌ COMPLETION API ERROR: status={classified.status_code}, message={classified.message}")
            raise classified from e
        except APIConnectionError as e:
            logger.error(f"❌ COMPLETION API UNREACHABLE: {str(e)}")
            raise CompletionAPIError(f"Could not reach the completion endpoint: {str(e)}") from e
        except httpx.HTTPError as e:
            logger.error(f"❌ COMPLETION TRANSPORT ERROR: {str(e)}")
            raise CompletionAPIError(f"Connection to the completion endpoint failed: {str(e)}") from e

        if decoder.skipped_lines:
            logger.warning(f"⚠️ STREAM HAD MALFORMED LINES: skipped={decoder.skipped_lines}")
        logger.info(f"✅ STREAM COMPLETE: deltas={delta_count}")
