"""Errors raised while turning a request into a quiz.

Each error carries the ``kind`` reported in logs and the HTTP status the API
layer answers with. The message is what the caller sees.
"""


class QuizGenerationError(Exception):
    kind = "QuizGenerationError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingCredentialError(QuizGenerationError):
    kind = "MissingCredential"

    def __init__(self, message: str = "API Key Missing on Server"):
        super().__init__(message)


class UpstreamExhaustedError(QuizGenerationError):
    """Every model in the fallback chain failed; keeps the last failure."""

    kind = "UpstreamExhausted"

    def __init__(self, last_error: Exception | None, attempted: list[str]):
        message = str(last_error) if last_error else "No model produced a response"
        super().__init__(message)
        self.last_error = last_error
        self.attempted = attempted


class InvalidModelOutputError(QuizGenerationError):
    """The model answered but the text could not be reduced to a quiz.

    ``raw_text`` is kept for server-side logging only.
    """

    kind = "InvalidModelOutput"

    def __init__(self, raw_text: str, message: str = "AI returned invalid JSON structure"):
        super().__init__(message)
        self.raw_text = raw_text


class MalformedRequestError(QuizGenerationError):
    kind = "MalformedRequest"
    status_code = 400
