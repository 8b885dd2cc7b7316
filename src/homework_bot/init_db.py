import asyncio
from pathlib import Path
from .config import load_settings
from .db import ensure_schema, make_engine

async def main():
    settings = load_settings()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL is not set; nothing to initialize")
    is_sqlite = settings.database_url.startswith("sqlite")
    if is_sqlite:
        Path("./data").mkdir(parents=True, exist_ok=True)

    engine = make_engine(settings.database_url)
    await ensure_schema(engine, sqlite_tuning=is_sqlite)
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
