import asyncio
import logging
import traceback
from pathlib import Path
from aiogram import Bot, Dispatcher
from .config import Settings, load_settings
from .db import ensure_schema, make_engine, make_sessionmaker
from .handlers import register_handlers
from .messaging import split_message
from .state import SessionStateManager
from .store import SqlKeyValueStore

async def _notify_admins(bot: Bot, admin_ids: list[int], message: str) -> None:
    chunks = split_message(message)
    for admin_id in admin_ids:
        for chunk in chunks:
            await bot.send_message(admin_id, chunk, parse_mode=None)

async def _make_state(settings: Settings):
    if not settings.database_url:
        logging.getLogger(__name__).warning("store_degraded: DATABASE_URL not set, running without persistence")
        return SessionStateManager(None), None
    is_sqlite = settings.database_url.startswith("sqlite")
    if is_sqlite:
        Path("./data").mkdir(parents=True, exist_ok=True)
    engine = make_engine(settings.database_url)
    await ensure_schema(engine, sqlite_tuning=is_sqlite)
    return SessionStateManager(SqlKeyValueStore(make_sessionmaker(engine))), engine

async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    bot = Bot(settings.bot_token)
    engine = None
    try:
        state, engine = await _make_state(settings)
        dp = Dispatcher()
        register_handlers(dp, settings=settings, state=state)
        logging.getLogger(__name__).info("bot_configured model=%s store=%s", settings.llm_model, not state.degraded)
        await dp.start_polling(bot)
    except Exception:
        error_text = traceback.format_exc()
        logging.getLogger(__name__).exception("bot_run_failed")
        try:
            await _notify_admins(
                bot,
                settings.admin_ids,
                f"Bot error detected:\n\n{error_text}",
            )
        except Exception:
            logging.getLogger(__name__).exception("failed_to_notify_admins")
        raise
    finally:
        await bot.session.close()
        if engine is not None:
            await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
