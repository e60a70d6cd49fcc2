import asyncio
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from app.utils.catalog import InventoryCatalog

scheduler = AsyncIOScheduler()

CATALOG_JOB_ID = "catalog_refresh"


async def refresh_catalog(catalog: InventoryCatalog):
    """Re-read the inventory sheet off the event loop."""
    try:
        count = await asyncio.to_thread(catalog.reload)
        logger.debug(f"Catalog refresh job done: {count} vehicles")
    except Exception as e:
        logger.error(f"Catalog refresh job failed: {e}")


def schedule_catalog_refresh(catalog: InventoryCatalog, minutes: int) -> None:
    """(Re)register the periodic inventory refresh. minutes <= 0 disables it."""
    if scheduler.get_job(CATALOG_JOB_ID):
        scheduler.remove_job(CATALOG_JOB_ID)

    if minutes <= 0:
        logger.info("Catalog refresh disabled")
        return

    scheduler.add_job(
        refresh_catalog,
        'interval',
        minutes=minutes,
        args=[catalog],
        id=CATALOG_JOB_ID,
    )
    logger.info(f"⏰ Catalog refresh scheduled every {minutes} min")
