from typing import Sequence

from loguru import logger

from app.llm.qualifier import Qualifier
from app.llm.summarizer import Summarizer
from app.models.dto import DialogueTurn, IntakeOutcome, MatchResult, PreferenceRecord, TurnOutcome
from app.utils.catalog import InventoryRecord
from app.utils.intake import missing_fields, resolve
from app.utils.matching import build_match_result, rank_matches


async def run_intake(
    history: Sequence[DialogueTurn],
    record: PreferenceRecord,
    qualifier: Qualifier,
) -> IntakeOutcome:
    """Ask the qualifier about the dialogue so far and merge what it found."""
    extraction = await qualifier.extract(history, missing_fields(record))
    proposed = extraction.message if extraction is not None else ""
    return resolve(record, extraction, proposed)


async def run_match(
    record: PreferenceRecord,
    catalog: Sequence[InventoryRecord],
    summarizer: Summarizer,
) -> MatchResult:
    """Rank the snapshot for a complete record and attach a summary."""
    top = rank_matches(record, catalog)
    summary = await summarizer.summarize(top, record)
    return build_match_result(top, summary)


async def process_turn(
    history: Sequence[DialogueTurn],
    record: PreferenceRecord,
    qualifier: Qualifier,
    summarizer: Summarizer,
    catalog: Sequence[InventoryRecord],
) -> TurnOutcome:
    """
    One user turn end to end.

    Returns the updated record in every case so the caller can persist it.
    Matching only runs once the intake gate reports the record complete.
    """
    intake = await run_intake(history, record, qualifier)
    if not intake.is_complete:
        return TurnOutcome(
            record=intake.record,
            is_complete=False,
            reply_message=intake.reply_message,
        )

    logger.info("Preferences complete - matching inventory")
    result = await run_match(intake.record, catalog, summarizer)
    return TurnOutcome(
        record=intake.record,
        is_complete=True,
        reply_message=intake.reply_message,
        match_result=result,
    )
