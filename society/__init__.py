from .errors import (
    SocietyError,
    UnauthorizedError,
    InvalidRequestError,
    EventNotFoundError,
    EventAlreadyFinalizedError,
    StoreError,
)
from .handicap import calculate_adjustment, apply_adjustment, get_category
from .events import (
    EventUpdate,
    create_event,
    finalize_event,
    unfinalize_event,
)
from .players import create_player, current_handicap
from .store import FileChange, VersionedStore, GitHubStore, LocalStore
from .service import finalize, unfinalize, register_player, schedule_event, get_data

__all__ = [
    # Errors
    'SocietyError',
    'UnauthorizedError',
    'InvalidRequestError',
    'EventNotFoundError',
    'EventAlreadyFinalizedError',
    'StoreError',
    # Handicap policy
    'calculate_adjustment',
    'apply_adjustment',
    'get_category',
    # Finalization / reversal engines
    'EventUpdate',
    'create_event',
    'finalize_event',
    'unfinalize_event',
    # Players
    'create_player',
    'current_handicap',
    # Stores
    'FileChange',
    'VersionedStore',
    'GitHubStore',
    'LocalStore',
    # Store-backed operations
    'finalize',
    'unfinalize',
    'register_player',
    'schedule_event',
    'get_data',
]
