import logging
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .settings import settings
from .db import engine
from .models import Base
from .api import router as api_router
from .auth import Identity, require_roles
from .realtime import broadcaster
from .sse import sse_stream

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, "INFO"))

app = FastAPI(title="Gym Access Stream", version="0.1.0")
app.include_router(api_router)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

@app.on_event("startup")
async def on_start():
    Base.metadata.create_all(engine)

@app.get("/api/v1/rfid/events")
async def stream(user: Identity = Depends(require_roles(settings.STREAM_ROLES))):
    # Registered before the response starts; the generator's finally unregisters it
    # when the client goes away.
    channel = broadcaster.connect(user)
    return sse_stream(broadcaster.stream(channel))

@app.get("/")
def root():
    return {"name": "gym-access-stream", "status": "ok", "subscribers": broadcaster.registry.size()}
