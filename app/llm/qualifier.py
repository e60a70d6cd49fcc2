import json
from typing import Optional, Sequence

from loguru import logger
from pydantic import ValidationError

from app.config import Settings
from app.models.dto import DialogueTurn, ExtractionResult
from app.llm.prompts import QUALIFIER_PROMPT, build_qualifier_context
from app.llm.client import chat_completion, extract_content


def extract_json(text: str) -> str:
    """
    Extract JSON object from text (may contain markdown or extra text).
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("No JSON object found")
    return text[start:end+1]


def parse_extraction(raw: str) -> Optional[ExtractionResult]:
    """Validate the qualifier's raw reply. Anything off-shape is treated as no extraction."""
    try:
        data = json.loads(extract_json(raw))
        return ExtractionResult.model_validate(data)
    except (ValueError, ValidationError):
        logger.exception(f"Error parsing qualifier JSON: {raw!r}")
        return None


def build_messages(history: Sequence[DialogueTurn], missing: Sequence[str]) -> list[dict]:
    messages = [
        {"role": "system", "content": QUALIFIER_PROMPT},
        {"role": "system", "content": build_qualifier_context(list(missing))},
    ]
    for turn in history:
        messages.append({"role": turn.role, "content": turn.text})
    return messages


class Qualifier:
    """NLU/NLG collaborator: reads the dialogue, proposes field values and the next question."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def extract(
        self,
        history: Sequence[DialogueTurn],
        missing: Sequence[str],
    ) -> Optional[ExtractionResult]:
        messages = build_messages(history, missing)

        try:
            resp = await chat_completion(
                messages,
                self.settings,
                model=self.settings.QUALIFIER_MODEL,
                temperature=0.3,
                max_tokens=1500,
                json_mode=True,
            )
            raw = extract_content(resp)
        except Exception:
            logger.exception("Error calling qualifier model")
            return None

        return parse_extraction(raw)
