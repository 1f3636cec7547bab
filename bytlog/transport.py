"""
Relay transport: ship log calls from an untrusted process to a log_relay
server instead of writing them locally.

Wire format (POST <base_url>/api/log):
{
    "level": "info",
    "message": "User logged in",
    "data": {...},                                  # optional
    "context": {"module": "auth", "userId": "u-1", ...}
}

Delivery happens on a background thread. The caller never waits for it and
never sees its failures; with BYTLOG_DEV set they are logged locally.
"""

import json
import logging
import os
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Mapping, Optional

import requests

from bytlog.core import ContextLogger
from bytlog.formatter import decycle
from bytlog.levels import Level

RELAY_PATH = '/api/log'
RELAY_URL_ENV = 'BYTLOG_RELAY_URL'
DEV_FLAG_ENV = 'BYTLOG_DEV'
DEFAULT_RELAY_URL = 'http://localhost:8080'

log = logging.getLogger(__name__)


def is_dev_mode() -> bool:
    return os.getenv(DEV_FLAG_ENV, '').strip().lower() in ('1', 'true', 'yes', 'on')


def _json_safe(value: Any) -> Any:
    """Round-trip through json so the body is guaranteed serializable"""
    return json.loads(json.dumps(decycle(value), default=str))


def context_to_wire(context: Mapping[str, Any]) -> Dict[str, Any]:
    wire = {k: v for k, v in context.items() if k != 'user_id'}
    if context.get('user_id'):
        wire['userId'] = context['user_id']
    return wire


def build_envelope(
    level: Level,
    message: str,
    data: Any,
    context: Mapping[str, Any],
) -> Dict[str, Any]:
    envelope: Dict[str, Any] = {
        'level': level.name.lower(),
        'message': str(message),
        'context': _json_safe(context_to_wire(context)),
    }
    if data is not None:
        # the relay only accepts an object here
        if isinstance(data, BaseException):
            data = {'error': data}
        elif not isinstance(data, Mapping):
            data = {'data': data}
        envelope['data'] = _json_safe(data)
    return envelope


class RelayLogger(ContextLogger):
    """
    Same surface as bytlog.Logger, but every call is POSTed to the relay.

    No level filtering happens here; the server applies its own LOG_LEVEL
    when it replays the call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        module: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        session: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
        timeout: float = 5.0,
    ):
        super().__init__(module, context)
        base_url = base_url or os.getenv(RELAY_URL_ENV, DEFAULT_RELAY_URL)
        self.url = base_url.rstrip('/') + RELAY_PATH
        self.session = session
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix='bytlog-relay')
        self.timeout = timeout
        self._pending: List[Future] = []

    def _post(self, envelope: Dict[str, Any]) -> None:
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(self.url, json=envelope, timeout=self.timeout)
            if not 200 <= response.status_code < 300:
                raise requests.exceptions.HTTPError(f"Relay answered {response.status_code}")
        except Exception as e:
            if is_dev_mode():
                log.warning("Failed to deliver log to %s: %s", self.url, e)

    def _log(self, level: Level, message: str, data: Any = None) -> None:
        try:
            envelope = build_envelope(level, message, data, self._context)
            future = self.executor.submit(self._post, envelope)
        except Exception as e:
            if is_dev_mode():
                log.warning("Failed to queue log for relay: %s", e)
            return
        self._pending = [f for f in self._pending if not f.done()]
        self._pending.append(future)

    def _spawn(self, context: Dict[str, Any]) -> 'RelayLogger':
        return RelayLogger(
            base_url=self.url[:-len(RELAY_PATH)],
            context=context,
            session=self.session,
            executor=self.executor,
            timeout=self.timeout,
        )

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until queued deliveries finish (for shutdown and tests)"""
        pending, self._pending = self._pending, []
        if pending:
            wait(pending, timeout=timeout)
