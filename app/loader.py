from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import Update
from typing import Any, Awaitable, Callable
from app.config import Settings
from app.llm.qualifier import Qualifier
from app.llm.summarizer import Summarizer
from app.utils.catalog import InventoryCatalog
from app.utils.logging import setup_logging
from app.utils.scheduler import scheduler, schedule_catalog_refresh
from app.handlers import start, collect_preferences
from loguru import logger


class DependencyMiddleware:
    """Middleware to inject dependencies into handlers."""

    def __init__(
        self,
        qualifier: Qualifier,
        summarizer: Summarizer,
        catalog: InventoryCatalog,
    ):
        self.qualifier = qualifier
        self.summarizer = summarizer
        self.catalog = catalog

    async def __call__(
        self,
        handler: Callable[[Update, dict[str, Any]], Awaitable[Any]],
        event: Update,
        data: dict[str, Any]
    ) -> Any:
        data["qualifier"] = self.qualifier
        data["summarizer"] = self.summarizer
        data["catalog"] = self.catalog
        return await handler(event, data)


def load_bot() -> tuple[Bot, Dispatcher]:
    """
    Load bot, dispatcher, and register all handlers.
    Returns (bot, dispatcher) tuple.
    """
    settings = Settings()
    setup_logging(settings.LOG_FILE, settings.LOG_LEVEL)
    logger.info("Settings loaded")

    bot = Bot(token=settings.BOT_TOKEN)
    storage = MemoryStorage()
    dp = Dispatcher(storage=storage)

    try:
        logger.info("🔄 Initializing InventoryCatalog...")
        catalog = InventoryCatalog(settings=settings)
        vehicle_count = len(catalog.get_all_vehicles())
        logger.info(f"✅ InventoryCatalog initialized: {vehicle_count} vehicles loaded")

        if vehicle_count == 0:
            logger.warning("⚠️ Inventory is empty - every search will return no units until the next refresh")

    except FileNotFoundError as e:
        logger.error(f"❌ CRITICAL: Inventory file not found: {e}")
        raise RuntimeError(f"Inventory file not found: {e}") from e
    except ValueError as e:
        logger.error(f"❌ CRITICAL: Inventory validation error: {e}")
        raise RuntimeError(f"Inventory validation failed: {e}") from e
    except Exception as e:
        logger.exception(f"❌ CRITICAL: Error initializing inventory: {type(e).__name__}: {e}")
        raise RuntimeError(f"Failed to initialize inventory: {type(e).__name__}: {e}") from e

    schedule_catalog_refresh(catalog, settings.CATALOG_REFRESH_MINUTES)

    qualifier = Qualifier(settings)
    summarizer = Summarizer(settings)

    dp.message.middleware(DependencyMiddleware(qualifier, summarizer, catalog))

    dp.include_router(start.router)
    dp.include_router(collect_preferences.router)

    logger.info("All handlers registered")

    return bot, dp


def start_scheduler() -> None:
    # AsyncIOScheduler needs the running loop, so this is called from main()
    if not scheduler.running:
        scheduler.start()
        logger.info("⏰ AsyncIOScheduler started")
