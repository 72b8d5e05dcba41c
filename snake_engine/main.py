from fastapi import FastAPI
import logging

from snake_engine.api.routes import router
from snake_engine.config import load_settings

app = FastAPI(title="snake-engine", version="0.1.0")
app.include_router(router)
logger = logging.getLogger(__name__)


# Settings are read at startup, not import, so a bad SNAKE_* value or a
# missing `.env` never breaks `import snake_engine.main`.
@app.on_event("startup")
async def _startup() -> None:
    settings = load_settings()
    # Configure logging
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    app.state.settings = settings
    logger.info("snake-engine API ready (%s, %s)", settings.game_mode.value, settings.difficulty.value)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "snake-engine", "version": "0.1.0"}
