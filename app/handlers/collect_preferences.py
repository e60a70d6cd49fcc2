from aiogram import Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import Message
from aiogram.utils.chat_action import ChatActionSender
from app.fsm.states import ConversationState
from app.models.dto import DialogueTurn, MatchResult, PreferenceRecord
from app.llm.qualifier import Qualifier
from app.llm.summarizer import Summarizer
from app.utils.catalog import InventoryCatalog
from app.utils.intake import missing_fields
from app.utils.pipeline import process_turn
from app.utils.response_helpers import format_vehicle_caption
from loguru import logger

router = Router()

# Keep the prompt bounded on very long chats.
MAX_HISTORY_TURNS = 40


def load_session(data: dict) -> tuple[list[DialogueTurn], PreferenceRecord]:
    history = [DialogueTurn.model_validate(t) for t in data.get("history", [])]
    record = PreferenceRecord.model_validate(data.get("record") or {})
    return history, record


async def save_session(state: FSMContext, history: list[DialogueTurn], record: PreferenceRecord) -> None:
    await state.update_data(
        history=[t.model_dump() for t in history[-MAX_HISTORY_TURNS:]],
        record=record.model_dump(mode="json"),
    )


async def send_match_result(message: Message, result: MatchResult) -> None:
    """Summary first, then one bubble per vehicle."""
    await message.answer(result.summary)
    for vehicle in result.top_matches:
        caption = format_vehicle_caption(vehicle)
        if vehicle.image_1:
            try:
                await message.answer_photo(vehicle.image_1, caption=caption)
                continue
            except TelegramBadRequest as e:
                logger.warning(f"Photo rejected for {vehicle.sku}: {e}. Sending text only.")
        await message.answer(caption)


def typing(message: Message) -> ChatActionSender:
    """Typing indicator while the qualifier and summary calls run."""
    return ChatActionSender.typing(bot=message.bot, chat_id=message.chat.id)


async def process_message(
    message: Message,
    state: FSMContext,
    qualifier: Qualifier,
    summarizer: Summarizer,
    catalog: InventoryCatalog,
) -> None:
    """
    Run one turn against the stored session.
    An incomplete outcome leaves the FSM state as it is; a complete one always ends in done.
    """
    text = (message.text or "").strip()
    if not text:
        await message.answer("Text lang po muna ang kaya kong basahin. Pakitype po ang sagot niyo.")
        return

    history, record = load_session(await state.get_data())
    history.append(DialogueTurn(role="user", text=text))

    async with typing(message):
        outcome = await process_turn(history, record, qualifier, summarizer, catalog.get_all_vehicles())

    history.append(DialogueTurn(role="assistant", text=outcome.reply_message))

    if not outcome.is_complete:
        await save_session(state, history, outcome.record)
        logger.info(f"User {message.from_user.id}: still missing {missing_fields(outcome.record)}")
        await message.answer(outcome.reply_message)
        return

    result = outcome.match_result
    history.append(DialogueTurn(role="assistant", text=result.summary))
    await save_session(state, history, outcome.record)

    await state.set_state(ConversationState.matching)
    try:
        if outcome.reply_message.strip():
            await message.answer(outcome.reply_message)
        await send_match_result(message, result)
    finally:
        await state.set_state(ConversationState.done)
    logger.info(f"User {message.from_user.id}: sent {len(result.top_matches)} match(es)")


@router.message(ConversationState.collecting)
async def handle_collecting(
    message: Message,
    state: FSMContext,
    qualifier: Qualifier,
    summarizer: Summarizer,
    catalog: InventoryCatalog,
):
    """
    Collect body type, city, payment type, budget and transmission.
    Once all are known, rank the inventory and show the best units.
    """
    await process_message(message, state, qualifier, summarizer, catalog)


@router.message(ConversationState.done)
async def handle_done(
    message: Message,
    state: FSMContext,
    qualifier: Qualifier,
    summarizer: Summarizer,
    catalog: InventoryCatalog,
):
    """
    Results already shown - a follow-up (e.g. "manual na lang") is a fresh match
    on the stored record. /start begins a new search.
    """
    await process_message(message, state, qualifier, summarizer, catalog)


@router.message(ConversationState.matching)
async def handle_matching(message: Message):
    await message.answer("Sandali lang po, hinahanap ko pa ang best units para sa inyo...")
