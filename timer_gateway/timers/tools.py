"""Command surface for the timer service.

Maps the named commands a host exposes to operators (``createTimer``,
``pauseTimer``, ...) onto ``TimerService`` methods, and publishes tool
definitions for agent frameworks.
"""
from typing import Any, Awaitable, Callable

from loguru import logger

from .errors import InvalidPayloadError, UnknownCommandError
from .service import TimerService

logger = logger.bind(module="timers.tools")


# Singleton instance (initialized by the host)
_timer_service: TimerService | None = None


def init_timer_tools(timer_service: TimerService) -> None:
    """Initialize the timer tools with a service instance.

    Call this during host startup.
    """
    global _timer_service
    _timer_service = timer_service


def _get_service() -> TimerService:
    if _timer_service is None:
        raise RuntimeError("Timer tools not initialized; call init_timer_tools() first")
    return _timer_service


# ============== Tool Definitions ==============
# These follow a common tool schema pattern compatible with OpenAI/Anthropic

_NAME_PARAMETER = {
    "type": "string",
    "description": "Timer name",
}

CREATE_TIMER_TOOL = {
    "name": "createTimer",
    "description": """Create a new paused timer.

Duration is either an integer number of milliseconds or human-readable text,
for example "1m", "90s", "1h 30m". Resume the timer to start it.""",
    "parameters": {
        "type": "object",
        "properties": {
            "name": _NAME_PARAMETER,
            "type": {
                "type": "string",
                "description": (
                    "Registered timer type, e.g. \"incrementing\" (counts up to the "
                    "duration) or \"decrementing\" (counts down from it)"
                ),
            },
            "duration": {
                "type": ["integer", "string"],
                "description": "Milliseconds, or duration text such as \"5m\"",
            },
        },
        "required": ["name", "type", "duration"],
    },
}

DELETE_TIMER_TOOL = {
    "name": "deleteTimer",
    "description": "Delete a timer.",
    "parameters": {
        "type": "object",
        "properties": {"name": _NAME_PARAMETER},
        "required": ["name"],
    },
}

RESET_TIMER_TOOL = {
    "name": "resetTimer",
    "description": "Reset a timer to its starting value. Paused afterwards unless pause is false.",
    "parameters": {
        "type": "object",
        "properties": {
            "name": _NAME_PARAMETER,
            "pause": {
                "type": "boolean",
                "description": "Leave the timer paused after resetting",
                "default": True,
            },
        },
        "required": ["name"],
    },
}

PAUSE_TIMER_TOOL = {
    "name": "pauseTimer",
    "description": "Pause a running timer.",
    "parameters": {
        "type": "object",
        "properties": {"name": _NAME_PARAMETER},
        "required": ["name"],
    },
}

RESUME_TIMER_TOOL = {
    "name": "resumeTimer",
    "description": "Resume a paused timer.",
    "parameters": {
        "type": "object",
        "properties": {"name": _NAME_PARAMETER},
        "required": ["name"],
    },
}

TOGGLE_TIMER_TOOL = {
    "name": "toggleTimer",
    "description": "Pause a running timer, or resume a paused one.",
    "parameters": {
        "type": "object",
        "properties": {"name": _NAME_PARAMETER},
        "required": ["name"],
    },
}

ALL_TIMER_TOOLS = [
    CREATE_TIMER_TOOL,
    DELETE_TIMER_TOOL,
    RESET_TIMER_TOOL,
    PAUSE_TIMER_TOOL,
    RESUME_TIMER_TOOL,
    TOGGLE_TIMER_TOOL,
]


# ============== Command Handlers ==============

def _timer_result(timer) -> dict[str, Any] | None:
    return timer.to_dict() if timer is not None else None


def _create(service: TimerService, payload: dict[str, Any]) -> dict[str, Any] | None:
    return _timer_result(service.create(payload["name"], payload["type"], payload["duration"]))


def _delete(service: TimerService, payload: dict[str, Any]) -> dict[str, Any] | None:
    return service.delete(payload["name"]).to_dict()


def _reset(service: TimerService, payload: dict[str, Any]) -> dict[str, Any] | None:
    pause = payload.get("pause")
    if pause is None:
        pause = True
    elif not isinstance(pause, bool):
        raise InvalidPayloadError("resetTimer", f"pause must be a boolean, got {pause!r}")
    return _timer_result(service.reset(payload["name"], pause=pause))


def _pause(service: TimerService, payload: dict[str, Any]) -> dict[str, Any] | None:
    return _timer_result(service.pause(payload["name"]))


def _resume(service: TimerService, payload: dict[str, Any]) -> dict[str, Any] | None:
    return _timer_result(service.resume(payload["name"]))


def _toggle(service: TimerService, payload: dict[str, Any]) -> dict[str, Any] | None:
    return _timer_result(service.toggle(payload["name"]))


CommandHandler = Callable[[TimerService, dict[str, Any]], "dict[str, Any] | None"]

COMMANDS: dict[str, CommandHandler] = {
    "createTimer": _create,
    "deleteTimer": _delete,
    "resetTimer": _reset,
    "pauseTimer": _pause,
    "resumeTimer": _resume,
    "toggleTimer": _toggle,
}


def dispatch_command(
    service: TimerService,
    command: str,
    payload: dict[str, Any] | None = None,
) -> dict[str, Any] | None:
    """Run a named command against a timer service.

    Args:
        service: The timer service
        command: Command name, e.g. "createTimer"
        payload: Command arguments

    Returns:
        The resulting timer as a dict, the delete confirmation, or None for
        a pause/resume that changed nothing

    Raises:
        UnknownCommandError: Command is not registered
        InvalidPayloadError: Payload is not an object, or a field has the wrong type
        KeyError: A required payload field is missing
        TimerError: Propagated from the timer operation
    """
    handler = COMMANDS.get(command)
    if handler is None:
        raise UnknownCommandError(command)
    if payload is None:
        payload = {}
    elif not isinstance(payload, dict):
        raise InvalidPayloadError(command, f"expected an object, got {type(payload).__name__}")
    if "name" in payload and not isinstance(payload["name"], str):
        raise InvalidPayloadError(command, "name must be a string")
    if "name" in payload and not isinstance(payload["name"], str):
        raise InvalidPayloadError(command, "name must be a string")

    logger.debug(f"Dispatching {command} with {payload}")
    return handler(service, payload)


# ============== Tool Functions ==============

def _tool(command: str) -> Callable[..., Awaitable[dict[str, Any] | None]]:
    async def run(**kwargs: Any) -> dict[str, Any] | None:
        return dispatch_command(_get_service(), command, kwargs)

    run.__name__ = f"{command}_tool"
    return run


TOOL_IMPLEMENTATIONS = {command: _tool(command) for command in COMMANDS}
