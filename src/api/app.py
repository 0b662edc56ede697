"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import mortgages
from src.config import settings

app = FastAPI(
    title=settings.app_name,
    description="Mortgage amortization schedules and extra-payment simulations",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mortgages.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
