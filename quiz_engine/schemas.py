from enum import Enum
from typing import List

from pydantic import BaseModel, Field, StrictInt, model_validator


class GenerationMode(str, Enum):
    TOPIC = "topic"
    TEXT = "text"
    FILE = "file"


class QuestionType(str, Enum):
    MIXED = "Mixed"
    TRUE_FALSE = "True/False"
    FILL_BLANKS = "Fill Blanks"
    STANDARD = "Standard"


class GenerationConfig(BaseModel):
    """How the quiz should look. Values are passed to the model as directives."""

    language: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    type: QuestionType
    count: int = Field(ge=1, le=50)


class GenerationRequest(BaseModel):
    """Schema for requesting a new quiz to be generated."""

    mode: GenerationMode
    content: str = Field(min_length=1)
    config: GenerationConfig


class Attachment(BaseModel):
    """Binary part sent next to the prompt, still base64 encoded."""

    mime_type: str
    data: str


class Question(BaseModel):
    """Represents a single question within a quiz."""

    id: StrictInt
    question: str
    options: List[str]
    answer: StrictInt
    explanation: str

    @model_validator(mode="after")
    def check_answer_index(self):
        if len(self.options) != 4:
            raise ValueError(f"question {self.id} has {len(self.options)} options, expected 4")
        if not 0 <= self.answer < len(self.options):
            raise ValueError(f"question {self.id} answer {self.answer} is out of range")
        return self


class QuizDocument(BaseModel):
    subject: str
    topicName: str
    summary: str | None = None
    questions: List[Question]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
