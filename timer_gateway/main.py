"""FastAPI entry point"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from .config import settings
from .logging_config import setup_logging
from .timers import (
    DuplicateTimerError,
    Timer,
    TimerError,
    TimerEvent,
    TimerNotFoundError,
    TimerService,
    dispatch_command,
    duration_to_human,
    init_timer_tools,
    timer_types,
)

# Global service instance
timer_service: Optional[TimerService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifecycle"""
    global timer_service

    setup_logging(settings.log_level)

    logger.info("=" * 50)
    logger.info("  Timer Gateway")
    logger.info(f"  Tick rate: {settings.tick_rate_ms}ms")
    logger.info(f"  Persistence: {settings.json_path or 'memory'}")
    logger.info("=" * 50)

    timer_service = TimerService(
        tick_rate_ms=settings.tick_rate_ms,
        json_path=settings.json_path,
    )
    init_timer_tools(timer_service)

    loop = asyncio.get_running_loop()

    def broadcast_event(event: TimerEvent) -> None:
        # Events may be raised off the loop thread
        loop.call_soon_threadsafe(
            lambda: loop.create_task(ws_manager.broadcast(event.type, event.payload))
        )

    timer_service.on_event(broadcast_event)
    await timer_service.start()

    logger.info("Gateway started")
    logger.info(f"FastAPI docs: http://{settings.host}:{settings.port}/docs")
    logger.info(f"WebSocket: ws://{settings.host}:{settings.port}/ws")

    yield

    logger.info("Shutting down...")
    timer_service.off_event(broadcast_event)
    await timer_service.stop()
    timer_service = None
    logger.info("Goodbye!")


app = FastAPI(
    title="Timer Gateway",
    description="Named, typed timers advanced on a periodic tick",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============== Pydantic Models ==============

class TimerCreateRequest(BaseModel):
    """Create timer request"""
    name: str
    type: str
    # Milliseconds (int) or duration text (str); checked by the timer service
    duration: Any


class TimerResetRequest(BaseModel):
    """Reset timer request"""
    pause: bool = True


# ============== Helpers ==============

def _get_service() -> TimerService:
    if not timer_service:
        raise HTTPException(status_code=503, detail="Service not ready")
    return timer_service


def _timer_view(timer: Timer) -> Dict[str, Any]:
    data = timer.to_dict()
    data["value_human"] = duration_to_human(timer.value)
    data["duration_human"] = duration_to_human(timer.duration)
    return data


def _change_response(timer: Optional[Timer]) -> Dict[str, Any]:
    return {
        "changed": timer is not None,
        "timer": _timer_view(timer) if timer else None,
    }


def _error_status(exc: TimerError) -> int:
    if isinstance(exc, TimerNotFoundError):
        return 404
    if isinstance(exc, DuplicateTimerError):
        return 409
    return 400


@app.exception_handler(TimerError)
async def timer_error_handler(request: Request, exc: TimerError):  # noqa: ARG001
    """Map timer errors onto HTTP status codes"""
    return JSONResponse(status_code=_error_status(exc), content={"detail": str(exc)})


# ============== REST API ==============

@app.get("/")
async def root():
    """Root"""
    return {
        "name": "Timer Gateway",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
@app.get("/api/health")
async def health():
    """Health check"""
    timers_status = {}
    if timer_service:
        timers_status = timer_service.status().to_dict()

    return {
        "status": "ok",
        "version": "0.1.0",
        "timers": timers_status,
    }


@app.get("/api/timers")
async def list_timers():
    """List timers"""
    service = _get_service()
    timers = service.list()
    return {
        "timers": [_timer_view(timer) for timer in timers],
        "total": len(timers),
        "types": timer_types(),
    }


@app.get("/api/timers/{name}")
async def get_timer(name: str):
    """Get timer details"""
    timer = _get_service().get(name)
    if not timer:
        raise HTTPException(status_code=404, detail=f"Timer '{name}' not found.")
    return {"timer": _timer_view(timer)}


@app.post("/api/timers", status_code=201)
async def create_timer(request: TimerCreateRequest):
    """Create timer"""
    timer = _get_service().create(request.name, request.type, request.duration)
    return {"timer": _timer_view(timer)}


@app.delete("/api/timers/{name}")
async def delete_timer(name: str):
    """Delete timer"""
    return _get_service().delete(name).to_dict()


@app.post("/api/timers/{name}/reset")
async def reset_timer(name: str, request: Optional[TimerResetRequest] = None):
    """Reset timer"""
    pause = request.pause if request else True
    timer = _get_service().reset(name, pause=pause)
    return {"timer": _timer_view(timer)}


@app.post("/api/timers/{name}/pause")
async def pause_timer(name: str):
    """Pause timer"""
    return _change_response(_get_service().pause(name))


@app.post("/api/timers/{name}/resume")
async def resume_timer(name: str):
    """Resume timer"""
    return _change_response(_get_service().resume(name))


@app.post("/api/timers/{name}/toggle")
async def toggle_timer(name: str):
    """Toggle timer"""
    return _change_response(_get_service().toggle(name))


@app.post("/api/commands/{command}")
async def run_command(command: str, payload: Optional[Dict[str, Any]] = None):
    """Run a named command (createTimer, pauseTimer, ...)"""
    service = _get_service()
    try:
        result = dispatch_command(service, command, payload)
    except KeyError as e:
        if isinstance(e, TimerError):
            raise
        raise HTTPException(status_code=400, detail=f"Missing field: {e.args[0]}")
    return {"command": command, "result": result}


# ============== WebSocket Gateway ==============

class ConnectionManager:
    """WebSocket connection manager"""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, client_id: str):
        """Accept a connection"""
        await websocket.accept()
        self.active_connections[client_id] = websocket
        logger.debug(f"WebSocket connected: {client_id}")

    def disconnect(self, client_id: str):
        """Drop a connection"""
        if client_id in self.active_connections:
            del self.active_connections[client_id]
            logger.debug(f"WebSocket disconnected: {client_id}")

    async def broadcast(self, event: str, payload: dict):
        """Broadcast an event to all clients"""
        for client_id, ws in list(self.active_connections.items()):
            try:
                await ws.send_json({
                    "type": "event",
                    "event": event,
                    "payload": payload,
                })
            except Exception as e:
                logger.debug(f"Broadcast to {client_id} failed: {e}")

    def count(self) -> int:
        """Number of connections"""
        return len(self.active_connections)


ws_manager = ConnectionManager()


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint: timer events out, commands in"""
    client_id = websocket.query_params.get("client_id") or uuid4().hex[:12]

    await ws_manager.connect(websocket, client_id)
    try:
        timers = timer_service.list() if timer_service else []
        await websocket.send_json({
            "type": "hello",
            "client_id": client_id,
            "timers": [timer.to_dict() for timer in timers],
        })

        while True:
            message = await websocket.receive_json()
            await handle_ws_message(websocket, message)

    except WebSocketDisconnect:
        pass
    finally:
        ws_manager.disconnect(client_id)


async def handle_ws_message(ws: WebSocket, message: Any):
    """Handle a WebSocket request: {"type": "req", "id": ..., "method": ..., "params": {...}}"""
    if not isinstance(message, dict):
        await ws.send_json({"type": "res", "id": "", "ok": False, "error": "Request must be a JSON object"})
        return
    if message.get("type") != "req":
        return

    req_id = message.get("id", "")
    method = message.get("method", "")
    params = message.get("params") or {}

    try:
        if not timer_service:
            raise RuntimeError("Service not ready")
        if method == "status":
            result = timer_service.status().to_dict()
        else:
            result = dispatch_command(timer_service, method, params)
        await ws.send_json({"type": "res", "id": req_id, "ok": True, "payload": result})
    except (TimerError, KeyError, TypeError, RuntimeError) as e:
        await ws.send_json({"type": "res", "id": req_id, "ok": False, "error": str(e)})


# ============== Startup ==============

def main():
    """Run the FastAPI server"""
    import uvicorn

    uvicorn.run(
        "timer_gateway.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
