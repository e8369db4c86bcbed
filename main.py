import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config

# Routers
from routers.health import router as health_router
from routers.marking import router as marking_router
from routers.practice import router as practice_router
from routers.questions import router as questions_router
from routers.sessions import router as sessions_router

logger = logging.getLogger("arithmetic-trainer")
logging.basicConfig(level=logging.INFO)
logger.info("allowed CORS origins: %s", ", ".join(config.CORS_ORIGINS))

app = FastAPI(title="Arithmetic Trainer API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(marking_router)  # /evaluate, /mark
app.include_router(questions_router)  # /question-types, /questions/...
app.include_router(sessions_router)  # /sessions/...
app.include_router(practice_router)  # /practice-zone/..., /percentages/...
app.include_router(health_router)  # /health/...
