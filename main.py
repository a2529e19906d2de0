import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file before app modules read them
load_dotenv()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from app.dependencies import get_repository  # noqa: E402
from app.middleware.timing import timing_middleware  # noqa: E402
from app.routes.issues import router as issues_router  # noqa: E402
from app.routes.session import router as session_router  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: load the stored issues
    repository = get_repository()
    logger.info(f"Loaded {len(repository.list_issues())} issues")

    yield


app = FastAPI(lifespan=lifespan)

app.middleware("http")(timing_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s | %(name)s | %(message)s",
)

app.include_router(issues_router)
app.include_router(session_router)
