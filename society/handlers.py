"""Request handling for the admin serverless functions.

Every handle_* function takes a RequestContext and the parsed JSON body and
returns a (status_code, response_body) tuple. FunctionHandler wires them into
the BaseHTTPRequestHandler classes the api/ functions expose.
"""

import hmac
import json
import logging
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler
from typing import Any, Callable, Optional

from pydantic import ValidationError

from . import service
from .config import Settings, build_store, get_settings
from .errors import InvalidRequestError, SocietyError, UnauthorizedError
from .schemas import AddPlayerRequest, FinalizeRequest, UnfinalizeRequest
from .store import VersionedStore

logger = logging.getLogger('society.handlers')

Response = tuple[int, dict[str, Any]]


@dataclass
class RequestContext:
    """Everything one request needs; nothing is shared between requests."""

    credential: Optional[str]
    settings: Settings = field(default_factory=get_settings)
    _store: Optional[VersionedStore] = None

    @classmethod
    def from_headers(cls, headers, settings: Optional[Settings] = None) -> 'RequestContext':
        return cls(
            credential=headers.get('Authorization') or headers.get('authorization'),
            settings=settings or get_settings(),
        )

    @property
    def store(self) -> VersionedStore:
        if self._store is None:
            self._store = build_store(self.settings)
        return self._store

    def authorize(self) -> None:
        """Raise UnauthorizedError unless the credential matches the admin password."""
        if not password_matches(self.credential, self.settings.admin_password):
            raise UnauthorizedError()

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None


def password_matches(given: Optional[str], expected: Optional[str]) -> bool:
    if not isinstance(given, str) or not isinstance(expected, str):
        return False
    if not given or not expected:
        return False
    return hmac.compare_digest(given.encode(), expected.encode())


def _error_response(error: SocietyError, failure: str) -> Response:
    if error.status_code >= 500:
        logger.error(f'{failure}: {error.message}')
        return error.status_code, {'message': failure, 'error': error.message}
    return error.status_code, {'message': error.message}


def _run(failure: str, operation: Callable[[], Response]) -> Response:
    """Run an operation, turning errors into responses."""
    try:
        return operation()
    except SocietyError as e:
        return _error_response(e, failure)
    except Exception as e:
        logger.exception(f'{failure}: {e}')
        return 500, {'message': failure, 'error': str(e)}


def handle_finalize_event(ctx: RequestContext, data: dict[str, Any]) -> Response:
    """Finalize an event from the admin UI's eventId, scores and allEvents."""

    def operation() -> Response:
        ctx.authorize()
        if not data.get('eventId') or not data.get('scores') or data.get('allEvents') is None:
            raise InvalidRequestError('Event ID, scores, and allEvents array are required.')
        try:
            request = FinalizeRequest.model_validate(data)
        except ValidationError as e:
            raise InvalidRequestError(f'Invalid finalize request: {e}') from e

        service.finalize(
            ctx.store,
            request.eventId,
            data['scores'],
            all_events=request.allEvents,
        )
        return 200, {'message': 'Event finalized successfully.'}

    return _run('Failed to finalize event.', operation)


def handle_unfinalize_event(ctx: RequestContext, data: dict[str, Any]) -> Response:
    """Revert a finalized event."""

    def operation() -> Response:
        ctx.authorize()
        try:
            request = UnfinalizeRequest.model_validate(data)
        except ValidationError as e:
            raise InvalidRequestError('Event ID is required.') from e

        service.unfinalize(ctx.store, request.eventId)
        return 200, {'message': 'Event reverted successfully.'}

    return _run('Failed to revert event.', operation)


def handle_add_player(ctx: RequestContext, data: dict[str, Any]) -> Response:
    def operation() -> Response:
        ctx.authorize()
        try:
            request = AddPlayerRequest.model_validate(data)
        except ValidationError as e:
            raise InvalidRequestError('Missing required player fields.') from e

        player = service.register_player(
            ctx.store,
            name=request.name,
            league_id=request.leagueId,
            handicap=request.handicap,
            email=request.email,
            phone=request.phone,
        )
        return 200, {'message': 'Player added successfully!', 'player': player}

    return _run('Failed to add player.', operation)


def handle_get_data(ctx: RequestContext, data: dict[str, Any]) -> Response:
    """Read-only: no credential needed."""
    return _run('Failed to fetch data.', lambda: (200, service.get_data(ctx.store)))


def handle_check_auth(ctx: RequestContext, data: dict[str, Any]) -> Response:
    def operation() -> Response:
        if password_matches(data.get('password'), ctx.settings.admin_password):
            return 200, {'message': 'Authentication successful'}
        return 401, {'message': 'Invalid password'}

    return _run('Failed to check password.', operation)


class FunctionHandler(BaseHTTPRequestHandler):
    """Base for the api/ functions. Subclasses set `operation`."""

    operation: Callable[[RequestContext, dict[str, Any]], Response]
    allow_get = False

    def do_OPTIONS(self):
        """Handle CORS preflight."""
        self.send_response(200)
        self._send_cors_headers()
        self.send_header('Content-Length', '0')
        self.end_headers()

    def do_GET(self):
        if self.allow_get:
            return self._dispatch({})
        return self._send_json(405, {'message': 'Method not allowed'})

    def do_POST(self):
        try:
            content_length = int(self.headers.get('Content-Length', 0))
            body = self.rfile.read(content_length)
            data = json.loads(body.decode()) if body else {}
        except (ValueError, UnicodeDecodeError):
            return self._send_json(400, {'message': 'Invalid JSON'})

        if not isinstance(data, dict):
            return self._send_json(400, {'message': 'Request body must be a JSON object'})
        return self._dispatch(data)

    def _dispatch(self, data: dict[str, Any]):
        ctx = RequestContext.from_headers(self.headers)
        try:
            status, result = type(self).operation(ctx, data)
        finally:
            ctx.close()
        return self._send_json(status, result)

    def _send_cors_headers(self):
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'GET, POST, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type, Authorization')

    def _send_json(self, status_code: int, data: dict[str, Any]):
        """Send JSON response with CORS headers."""
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self._send_cors_headers()
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, format, *args):
        logger.debug(format % args)
