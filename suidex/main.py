from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from suidex.api.routers.history import router as history_router
from suidex.api.routers.pools import router as pools_router

app = FastAPI(title="Sui DEX Pools API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(pools_router)
app.include_router(history_router)
