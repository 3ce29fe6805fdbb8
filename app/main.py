from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from app.core import (
    celery,
    config,
    database,
    event_bus,
    exception_handlers,
    redis,
)
from app.core.websocket_manager import websocket_manager
from app.core.middleware import auth_middleware, logging_middleware
from app.domains import (
    auth,
    comments,
    events,
    friends,
    groups,
    marketplace,
    messages,
    notifications,
    posts,
    realtime,
    uploads,
    users,
)
from app.domains.uploads.service import upload_dir


@asynccontextmanager
async def lifespan(app: FastAPI):
    celery.init_celery()
    event_bus.init_event_bus()
    await database.init_db()
    upload_dir()
    websocket_manager.on_presence_change(users.persist_presence)
    websocket_manager.on_heartbeat(users.touch_online)
    await websocket_manager.start()
    yield
    await websocket_manager.close_all()
    await websocket_manager.stop()


app = FastAPI(title=config.settings.APP_NAME, version=config.settings.APP_VERSION, lifespan=lifespan)

app.middleware("http")(auth_middleware)
app.middleware("http")(logging_middleware)
exception_handlers.setup_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
app.include_router(comments.router, prefix="/api/comments", tags=["Comments"])
app.include_router(friends.router, prefix="/api/friends", tags=["Friends"])
app.include_router(messages.router, prefix="/api/messages", tags=["Messages"])
app.include_router(groups.router, prefix="/api/groups", tags=["Groups"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(marketplace.router, prefix="/api/trading", tags=["Trading"])
app.include_router(uploads.router, prefix="/api/upload", tags=["Upload"])
app.include_router(realtime.ws_router, tags=["Realtime"])

app.mount(
    "/uploads",
    StaticFiles(directory=config.settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


@app.get("/health")
async def health():
    services = {
        "database": await database.check_connection(),
        "redis": await redis.check_connection(),
    }
    if not services["database"]:
        status = "unhealthy"
    elif not all(services.values()):
        status = "degraded"
    else:
        status = "healthy"
    return {
        "status": status,
        "services": services,
        "realtime": websocket_manager.get_connection_stats(),
        "version": config.settings.APP_VERSION,
    }
