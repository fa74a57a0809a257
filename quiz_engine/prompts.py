"""Prompt templates for quiz generation.

Each input mode has its own instruction block; all of them end with the shared
output contract that pins the JSON shape, the language rules and the
configuration directives.
"""

import base64
import binascii
from typing import Optional, Tuple

from .errors import MalformedRequestError
from .schemas import Attachment, GenerationConfig, GenerationMode, GenerationRequest, QuestionType

DEFAULT_MIME_TYPE = "image/jpeg"

TYPE_INSTRUCTIONS = {
    QuestionType.MIXED: (
        "- **VARIETY MODE:** Generate a mix of the following question styles "
        "(keeping exactly 4 options for ALL):\n"
        '  1. **Fill-in-the-Blank:** Question contains "______". Options: 4 words to fill it.\n'
        '  2. **Assertion-Reasoning:** Question: "Assertion (A): ... Reason (R): ...". '
        'Options: ["Both True", "A True R False", "A False R True", "Both False"].\n'
        '  3. **Statement Analysis:** Question: "Which of the following is INCORRECT?". '
        "Options: 4 full sentences.\n"
        "  4. **Standard MCQ:** Direct question. Options: 4 answers.\n"
        "- **CRITICAL:** Do NOT generate 2-option True/False. Always use 4 options."
    ),
    QuestionType.TRUE_FALSE: (
        '- Format: "Identify the TRUE (or FALSE) statement." '
        "Provide exactly 4 distinct statements as options."
    ),
    QuestionType.FILL_BLANKS: (
        '- Format: A sentence with a missing word "______". '
        "Provide exactly 4 word choices as options."
    ),
    QuestionType.STANDARD: "- Format: Standard Multiple Choice Question with exactly 4 options.",
}

TOPIC_TEMPLATE = """
You are a charismatic Quiz Examiner. Create a quiz on the TOPIC: "{content}".

**Content Strategy:**
1. Analyze the topic string to determine the 'subject' and refined 'topicName'.
{summary_step}3. 70% Core Knowledge questions.
4. 1st question must be EASY (Confidence Booster).
5. Include 1 question with a humorous tone or funny options (The 'Witty' One).
"""

TEXT_TEMPLATE = """
You are a meticulous Quiz Examiner. Create a quiz based STRICTLY on the following TEXT:

"{content}"

**Content Strategy:**
1. Analyze the text to infer the 'subject' and generate a catchy 'topicName'.
{summary_step}3. Questions must be answerable from the text.
4. 1st question: Giveaway/Easy.
"""

FILE_TEMPLATE = """
You are a Visual Data Analyst. Analyze the provided image/document.

**Task:**
1. Identify the 'subject' (e.g., if image is a circuit, subject is Physics/Electronics).
2. Generate a relevant 'topicName' describing the image content.
{summary_step}4. Extract key concepts and generate questions.

**Content Strategy:**
1. If diagram: Ask spatial questions.
2. If text: Quiz on concepts.
"""

SUMMARY_STEPS = {
    GenerationMode.TOPIC: "2. Generate a 'summary' (in {language}) that invites the user to take the quiz.\n",
    GenerationMode.TEXT: (
        "2. Generate a 'summary' (in {language}) that describes the key themes "
        'of the text WITHOUT saying "based on text".\n'
    ),
    GenerationMode.FILE: (
        "3. Generate a 'summary' (in {language}) describing the concept shown "
        '(e.g., "Test your understanding of Circuit Diagrams"). DO NOT say "This image shows...".\n'
    ),
}

# Placeholder kept so the numbering of the remaining steps stays stable.
NO_SUMMARY_STEPS = {
    GenerationMode.TOPIC: "2. Keep every question focused on the topic.\n",
    GenerationMode.TEXT: "2. Cover the key themes of the text evenly.\n",
    GenerationMode.FILE: "3. Keep every question tied to what is shown.\n",
}

MODE_TEMPLATES = {
    GenerationMode.TOPIC: TOPIC_TEMPLATE,
    GenerationMode.TEXT: TEXT_TEMPLATE,
    GenerationMode.FILE: FILE_TEMPLATE,
}

SUMMARY_FIELD = (
    '     "summary": "A short, engaging description (Max 25 words) of what the quiz covers. '
    "MUST BE IN {language}. CRITICAL: Do NOT mention 'source', 'image', 'provided text', or 'file'. "
    'Just describe the academic topic directly.",\n'
)

OUTPUT_CONTRACT = """
**CRITICAL OUTPUT RULES:**
1. Return ONLY valid JSON. No Markdown, no backticks, no intro text.
2. JSON Structure:
   {{
     "subject": "Broad Category (MUST BE IN ENGLISH, e.g., Physics, History)",
     "topicName": "Specific Title (MUST BE IN ENGLISH, e.g., Newton's Laws)",
{summary_field}     "questions": [
       {{
         "id": 1,
         "question": "Question text in {language}...",
         "options": ["Option A", "Option B", "Option C", "Option D"],
         "answer": 0,
         "explanation": "Brief reason in {language}."
       }}
     ]
   }}
3. QUESTION STYLE RULES ({question_type}):
{type_instructions}
4. **Ensure exactly 4 options per question.** (Mandatory).
5. "answer" must be a NUMBER, the index of the correct option (0, 1, 2, or 3), NOT a string.
6. **STRICT LANGUAGE RULES:**
   - **METADATA (subject, topicName):** You MUST write these strictly in **ENGLISH** (for internal categorization).
   - **CONTENT ({content_fields}):** You MUST write these in **{language}**.
7. Question Type: {question_type}, Difficulty: {difficulty}, Count: {count}.
"""


def parse_data_uri(content: str) -> Attachment:
    """Split ``data:<mime>;base64,<payload>`` into an attachment.

    The MIME type is the text between the first ``:`` and the first ``;``, the
    payload everything after the first ``,``.
    """
    colon = content.find(":")
    semicolon = content.find(";")
    comma = content.find(",")
    if colon == -1 or semicolon == -1 or comma == -1 or not colon < semicolon < comma:
        raise MalformedRequestError("File content must be a data URI like 'data:image/png;base64,...'")

    mime_type = content[colon + 1 : semicolon].strip() or DEFAULT_MIME_TYPE
    payload = content[comma + 1 :].strip()
    if not payload:
        raise MalformedRequestError("File content has an empty payload")

    try:
        decoded = base64.b64decode(payload)
    except (binascii.Error, ValueError):
        raise MalformedRequestError("File payload is not valid base64")
    if not decoded:
        raise MalformedRequestError("File payload is not valid base64")

    return Attachment(mime_type=mime_type, data=payload)


def output_contract(config: GenerationConfig, include_summary: bool = True) -> str:
    content_fields = "summary, question, options, explanation" if include_summary else "question, options, explanation"
    return OUTPUT_CONTRACT.format(
        summary_field=SUMMARY_FIELD.format(language=config.language) if include_summary else "",
        language=config.language,
        question_type=config.type.value,
        type_instructions=TYPE_INSTRUCTIONS[config.type],
        content_fields=content_fields,
        difficulty=config.difficulty,
        count=config.count,
    )


def build_prompt(
    request: GenerationRequest,
    max_text_chars: int = 10000,
    include_summary: bool = True,
) -> Tuple[str, Optional[Attachment]]:
    """Assemble the prompt for a request.

    Args:
        request: Validated generation request.
        max_text_chars: Upper bound on how much of ``text`` content is embedded.
        include_summary: Whether the model is asked for a ``summary`` field.

    Returns:
        The prompt and, for ``file`` mode, the attachment to send with it.
    """
    config = request.config
    attachment = None

    if request.mode == GenerationMode.TEXT:
        content = request.content[:max_text_chars]
    elif request.mode == GenerationMode.FILE:
        content = ""
        attachment = parse_data_uri(request.content)
    else:
        content = request.content

    steps = SUMMARY_STEPS if include_summary else NO_SUMMARY_STEPS
    body = MODE_TEMPLATES[request.mode].format(
        content=content,
        summary_step=steps[request.mode].format(language=config.language),
    )
    return body + output_contract(config, include_summary), attachment
