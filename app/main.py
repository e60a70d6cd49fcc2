import asyncio
from app.loader import load_bot, start_scheduler
from app.utils.scheduler import scheduler
from loguru import logger


async def main():
    """
    Main entry point - load bot and start polling.
    """
    try:
        bot, dp = load_bot()
        start_scheduler()
        logger.info("Starting bot...")
        await dp.start_polling(bot)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.exception(f"Bot error: {e}")
    finally:
        if scheduler.running:
            scheduler.shutdown(wait=False)
        if 'bot' in locals():
            await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
