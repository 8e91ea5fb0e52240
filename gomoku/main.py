import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gomoku.session import SessionManager
from gomoku.ws_handler import router as ws_router

load_dotenv()


def configure_logging(level_name: str):
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {level_name!r}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


configure_logging(os.getenv("LOG_LEVEL", "INFO"))

app = FastAPI(title="Gomoku")
app.state.sessions = SessionManager()

cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:5174")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in cors_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(ws_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
