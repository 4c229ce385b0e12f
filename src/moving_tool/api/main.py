from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware

from moving_tool import __version__
from moving_tool.engine import PricingEngine, MoveLogistics, InvalidInputError
from moving_tool.api.schemas import LogisticsIn
from moving_tool.api.jobs_api import router as jobs_router
from moving_tool.api.crew_api import router as crew_router
from moving_tool.api import state
from moving_tool.services.state_store import AppState

logger = logging.getLogger(__name__)


def _current_state(app: FastAPI) -> AppState:
    """The state routes see, honoring dependency overrides."""
    return app.dependency_overrides.get(state.get_state, state.get_state)()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Persist once on shutdown; handlers only mutate memory
    state.store.save(_current_state(app))


app = FastAPI(
    title="Moving Tool API",
    description="Backend API for the moving company quote & dispatch dashboard",
    version=__version__,
    lifespan=lifespan,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(jobs_router)
app.include_router(crew_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Moving Tool API Active"}


@app.post("/quote")
async def price_quote(req: LogisticsIn, engine: PricingEngine = Depends(state.get_engine)):
    """Price a move into minimal / recommended / win-the-job tiers."""
    try:
        result = engine.calculate(MoveLogistics(**req.model_dump()))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail={"error": str(e), "field": e.field})
    return jsonable_encoder(result)


@app.post("/system/save")
async def save_state(current: AppState = Depends(state.get_state)):
    """Write the current state to disk without waiting for shutdown."""
    state.store.save(current)
    return {"success": True, "data_dir": str(state.store.data_dir)}
