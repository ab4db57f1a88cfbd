import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from frigorifico_core.db import AsyncSessionLocal, engine
from frigorifico_core.errors import register_error_handlers
from frigorifico_core.logging_config import configure_logging
from frigorifico_core.security import ensure_master_user
from frigorifico_core.auth_api import router as auth_router
from frigorifico_core.admin_api import router as admin_router
from frigorifico_core.live_stock_api import router as live_stock_router
from frigorifico_core.slaughter import router as slaughter_router
from frigorifico_core.cold_storage_api import router as cold_storage_router
from frigorifico_core.boning import router as boning_router
from frigorifico_core.final_inventory_api import router as final_inventory_router
from frigorifico_core.debug_seed import router as debug_seed_router

logger = logging.getLogger("frigorifico_core.main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    async with AsyncSessionLocal() as session:
        await ensure_master_user(session)
    logger.info("Frigorifico API started")
    yield
    await engine.dispose()

app = FastAPI(title="Frigorifico Pipeline API", lifespan=lifespan)
register_error_handlers(app)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(live_stock_router)
app.include_router(slaughter_router)
app.include_router(cold_storage_router)
app.include_router(boning_router)
app.include_router(final_inventory_router)
app.include_router(debug_seed_router)

@app.get("/health")
async def health():
    return {"ok": True}
