from typing import Sequence

from loguru import logger

from app.config import Settings
from app.models.dto import MatchedVehicle, PreferenceRecord
from app.llm.prompts import MATCH_SUMMARY_PROMPT
from app.llm.client import chat_completion, extract_content
from app.utils.response_helpers import describe_vehicle


class Summarizer:
    """Asks the model for a short Taglish intro of the ranked units."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def summarize(self, matches: Sequence[MatchedVehicle], prefs: PreferenceRecord) -> str:
        """Returns "" when the model is unavailable; the caller substitutes a stock summary."""
        price_label = "SRP" if prefs.payment_type == "cash" else "all-in"
        lines = [describe_vehicle(v, prefs.payment_type) for v in matches] or ["(no units)"]
        buyer = (
            f"Buyer: {prefs.client_name or 'unknown name'}, {prefs.location_city}, "
            f"{prefs.body_type}, {prefs.transmission}, {prefs.payment_type} ({price_label})."
        )

        messages = [
            {"role": "system", "content": MATCH_SUMMARY_PROMPT.format(count=len(matches))},
            {"role": "user", "content": buyer + "\nUnits:\n" + "\n".join(lines)},
        ]

        try:
            resp = await chat_completion(
                messages,
                self.settings,
                model=self.settings.MATCH_SUMMARY_MODEL,
                temperature=0.2,
                max_tokens=400,
            )
            return extract_content(resp).strip()
        except Exception:
            logger.exception("Error calling match summary model")
            return ""
