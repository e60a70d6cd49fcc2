from aiogram.fsm.state import StatesGroup, State


class ConversationState(StatesGroup):
    collecting = State()  # qualifier loop until the record is complete
    matching = State()    # ranking the catalog for a complete record
    done = State()        # results shown; new messages re-run match on the stored record
