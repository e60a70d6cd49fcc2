from aiogram import Router, F
from aiogram.filters import StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import Message
from app.fsm.states import ConversationState
from app.models.dto import PreferenceRecord
from app.llm.qualifier import Qualifier
from app.llm.summarizer import Summarizer
from app.utils.catalog import InventoryCatalog
from app.handlers.collect_preferences import handle_collecting
from loguru import logger

router = Router()

GREETING = (
    "Hi po! Ako ang BentaCars Consultant 🚗 "
    "Tutulungan ko kayong hanapin ang best 2 units para sa inyo. "
    "Anong body type po ang hanap niyo? (sedan, SUV, MPV, van, pickup, hatchback)"
)


async def open_session(state: FSMContext) -> None:
    """Reset the session to an empty record with the greeting as first assistant turn."""
    await state.clear()
    await state.set_state(ConversationState.collecting)
    await state.set_data({
        "history": [{"role": "assistant", "text": GREETING}],
        "record": PreferenceRecord().model_dump(mode="json"),
    })


@router.message(F.text == "/start")
async def cmd_start(message: Message, state: FSMContext):
    """
    /start handler - clears FSM and starts collecting preferences.
    """
    await open_session(state)
    logger.info(f"User {message.from_user.id} started conversation")
    await message.answer(GREETING)


@router.message(F.text == "/id")
async def cmd_id(message: Message):
    """
    Diagnostic command to get chat ID.
    """
    chat_id = message.chat.id
    title = message.chat.title or "Private Chat"
    logger.info(f"📢 Chat ID request from '{title}': {chat_id}")
    try:
        await message.answer(f"Chat ID: {chat_id}")
    except Exception as e:
        logger.error(f"Could not send chat ID: {e}")


@router.message(StateFilter(None), F.text)
async def handle_first_message(
    message: Message,
    state: FSMContext,
    qualifier: Qualifier,
    summarizer: Summarizer,
    catalog: InventoryCatalog,
):
    """
    User wrote without /start - open a session and treat the text as the first answer.
    """
    logger.info(f"User {message.from_user.id} wrote without a session, opening one")
    await open_session(state)
    await handle_collecting(message, state, qualifier, summarizer, catalog)
