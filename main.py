from fastapi import FastAPI
from fastapi.responses import JSONResponse

# Internal imports
from config import config
from data.loader import load_dataset
from services.pipeline import ChartPipeline
from api.chart_routes import chart_router
from api.session_routes import session_router

import contextlib
import logging
import middleware

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Loads the dataset on startup and builds its pipeline.
    A malformed dataset aborts startup instead of serving partial data.
    """
    logger.info("Application starting up: loading dataset from %s", config.dataset_path)
    dataset = load_dataset(config.dataset_path)
    app.state.pipeline = ChartPipeline(dataset)
    logger.info("Chart pipeline ready with %d variations.", len(dataset.variations))

    yield

    logger.info("Application shutting down.")

# --- FastAPI App Initialization ---
app = FastAPI(
    lifespan=lifespan,
    title="Conversion Chart API",
    version="1.0.0",
    description="Daily and weekly conversion rates per A/B test variation, with zoom windows and tooltips."
)

# Add the middleware to the application
app.add_middleware(middleware.RequestIDMiddleware)

app.include_router(chart_router)
app.include_router(session_router)


@app.get("/health")
def health_check():
    return JSONResponse(content={"status": "healthy"}, status_code=200)
