import logging

from praxis.users import routes as users_router
from praxis.goals import routes as goals_router
from praxis.feedback import routes as feedback_router
from praxis.matching import routes as matching_router
from praxis.completions import routes as completions_router
from praxis.system import routes as system_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from praxis.core.config import CORS_ORIGINS, LOG_LEVEL
from praxis.core.database import Base, engine
from praxis.core.exceptions import register_exception_handlers

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(
    title="Praxis Goal Tree API",
    version="1.0.0",
    description="Backend for Praxis: goal trees, weighted progress, peer feedback and goal-based matching.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(users_router.router)
app.include_router(goals_router.router)
app.include_router(feedback_router.router)
app.include_router(matching_router.router)
app.include_router(completions_router.router)
app.include_router(system_router.router)


# DB Tables
@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
