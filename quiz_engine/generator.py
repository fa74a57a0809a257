import base64
import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import google.generativeai.client as genai
from google.generativeai.generative_models import GenerativeModel
from pydantic import ValidationError

from .errors import InvalidModelOutputError, MissingCredentialError, UpstreamExhaustedError
from .prompts import build_prompt
from .schemas import Attachment, GenerationRequest, QuizDocument

logger = logging.getLogger(__name__)

JSON_GENERATION_CONFIG = {"response_mime_type": "application/json"}


class ModelClient(Protocol):
    def generate(self, model_name: str, prompt: str, attachment: Optional[Attachment] = None) -> str: ...


class GeminiClient:
    """Thin wrapper around the Gemini SDK returning the raw response text."""

    def __init__(self, api_key: str | None, timeout: float = 60.0):
        if not api_key:
            raise MissingCredentialError()
        genai.configure(api_key=api_key)
        self.timeout = timeout

    def generate(self, model_name: str, prompt: str, attachment: Optional[Attachment] = None) -> str:
        model = GenerativeModel(model_name)
        parts: List[Any] = [prompt]
        if attachment:
            parts.append(
                {
                    "mime_type": attachment.mime_type,
                    "data": base64.b64decode(attachment.data),
                }
            )
        response = model.generate_content(
            parts,
            generation_config=JSON_GENERATION_CONFIG,
            request_options={"timeout": self.timeout},
        )
        return response.text


def generate_with_fallback(
    client: ModelClient,
    model_names: List[str],
    prompt: str,
    attachment: Optional[Attachment] = None,
) -> str:
    """Try each model in order and return the text of the first success.

    Raises:
        UpstreamExhaustedError: every model failed; carries the last error.
    """
    last_error: Exception | None = None
    attempted = []

    for model_name in model_names:
        attempted.append(model_name)
        try:
            text = client.generate(model_name, prompt, attachment)
        except Exception as e:
            logger.warning(f"Model {model_name} failed: {e}")
            last_error = e
            continue
        logger.info(f"Quiz generated with model {model_name}")
        return text

    logger.error(f"All models failed ({', '.join(attempted)}): {last_error}")
    raise UpstreamExhaustedError(last_error, attempted) from last_error


def extract_json(raw_text: str) -> Dict[str, Any]:
    """Parse the JSON object out of a model response.

    Code fences are dropped, then everything between the first ``{`` and the
    last ``}`` is parsed, which skips any prose around the object.
    """
    text = raw_text.replace("```json", "").replace("```", "").strip()

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        logger.error(f"JSON Parse Fail, no object in response: {raw_text!r}")
        raise InvalidModelOutputError(raw_text)

    try:
        return json.loads(text[start : end + 1])
    except (ValueError, RecursionError) as e:
        logger.error(f"JSON Parse Fail ({e}): {raw_text!r}")
        raise InvalidModelOutputError(raw_text) from e


class QuizRequestPipeline:
    """Builds the prompt, runs the fallback chain and parses the answer."""

    def __init__(
        self,
        client: ModelClient,
        model_names: List[str],
        max_text_chars: int = 10000,
        include_summary: bool = True,
        strict: bool = False,
    ):
        self.client = client
        self.model_names = model_names
        self.max_text_chars = max_text_chars
        self.include_summary = include_summary
        self.strict = strict

    def generate_quiz(self, request: GenerationRequest) -> Dict[str, Any]:
        prompt, attachment = build_prompt(request, self.max_text_chars, self.include_summary)
        raw_text = generate_with_fallback(self.client, self.model_names, prompt, attachment)
        quiz = extract_json(raw_text)
        if self.strict:
            self._validate(quiz, raw_text)
        return quiz

    def _validate(self, quiz: Dict[str, Any], raw_text: str) -> None:
        try:
            document = QuizDocument.model_validate(quiz)
        except ValidationError as e:
            logger.error(f"Quiz failed validation: {e}")
            raise InvalidModelOutputError(raw_text, "AI returned an invalid quiz") from e
        if self.include_summary and not document.summary:
            logger.error("Quiz is missing its summary")
            raise InvalidModelOutputError(raw_text, "AI returned an invalid quiz")
