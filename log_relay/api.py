"""
Log Relay - FastAPI endpoint that replays client-originated log calls
through a context-bound bytlog Logger.
"""
from typing import Any, Dict, Literal, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
import uvicorn

from bytlog.core import Logger, get_root_logger
from bytlog.formatter import DEFAULT_MODULE
from bytlog.transport import RELAY_PATH


app = FastAPI(title="Log Relay", description="Replays client log calls on the server console")

INVALID_PAYLOAD = {'error': 'Invalid log payload'}
PROCESSING_FAILED = {'error': 'Failed to process log'}


# Models
class RelayContext(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    module: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias='userId')

    def to_context(self) -> Dict[str, Any]:
        """Extra keys plus user_id; module is passed separately to child()"""
        context = dict(self.model_extra or {})
        context['user_id'] = self.user_id
        return context


class LogRelayRequest(BaseModel):
    level: Literal['debug', 'info', 'warn', 'error']
    message: str
    data: Optional[Dict[str, Any]] = None
    context: RelayContext = Field(default_factory=RelayContext)


def _relay_logger(request: Request) -> Logger:
    # honors app.dependency_overrides so tests see the same root as the route
    provider = request.app.dependency_overrides.get(get_root_logger, get_root_logger)
    return provider().child('log-relay')


@app.exception_handler(RequestValidationError)
async def invalid_payload(request: Request, exc: RequestValidationError):
    """Malformed envelopes: log the detail locally, answer generically"""
    _relay_logger(request).error('Rejected relayed log payload', {'errors': exc.errors()})
    return JSONResponse(status_code=400, content=INVALID_PAYLOAD)


# Endpoints
@app.post(RELAY_PATH)
async def relay_log(
    payload: LogRelayRequest,
    request: Request,
    root: Logger = Depends(get_root_logger),
):
    """Replay one log call from a client"""
    try:
        target = root.child(payload.context.module or DEFAULT_MODULE, **payload.context.to_context())
        getattr(target, payload.level)(payload.message, payload.data)
    except Exception as e:
        _relay_logger(request).error('Failed to process relayed log', {'error': e})
        return JSONResponse(status_code=500, content=PROCESSING_FAILED)
    return {}


@app.get('/health')
async def health():
    """Health check endpoint"""
    return {'status': 'healthy'}


def run_server(host: str = '0.0.0.0', port: int = 8080):
    """Run the Log Relay server"""
    uvicorn.run(app, host=host, port=port)


if __name__ == '__main__':
    run_server()
