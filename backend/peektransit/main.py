from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from peektransit.api.deps import close_shared_transit_client
from peektransit.api.v1.routes.health import router as health_router
from peektransit.api.v1.routes.stops import router as stops_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_shared_transit_client()


app = FastAPI(title="PeekTransit Schedule API", lifespan=lifespan)

# Read-only API; the widget and app clients call it directly.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/v1")
app.include_router(stops_router)
