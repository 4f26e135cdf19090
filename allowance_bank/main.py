"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Logging — root level from settings.LOG_LEVEL
  2. Lifespan manager — creates tables, provisions the balance row, and
     disposes of the engine on shutdown
  3. CORS middleware — any origin may call the API
  4. Exception handlers — map domain errors to {"error": "..."} responses
  5. Router registration — balance, transactions, spend

Running locally:
    uvicorn allowance_bank.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from allowance_bank.config import settings
from allowance_bank.cors import EmptyPreflightCORSMiddleware
from allowance_bank.database import AsyncSessionLocal, Base, engine
from allowance_bank.exceptions import register_exception_handlers
from allowance_bank.routers import balance, spend, transactions
from allowance_bank.services import balance_store

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      Creates all tables if they don't exist and makes sure the singleton
      balance row is there. In production the row is normally provisioned
      alongside the allowance trigger; this only fills the gap on a fresh
      database.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await balance_store.ensure_balance(session, settings.INITIAL_BALANCE_CENTS)
        await session.commit()
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Allowance bank: check the balance, spend money, see the history",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(balance.router, prefix=settings.API_PREFIX, tags=["Balance"])
app.include_router(transactions.router, prefix=settings.API_PREFIX, tags=["Transactions"])
app.include_router(spend.router, prefix=settings.API_PREFIX, tags=["Spend"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe for the hosting platform."""
    return {"status": "ok", "version": settings.APP_VERSION}
