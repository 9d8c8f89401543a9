"""Runtime configuration from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, Field

from .errors import StoreError
from .store import GitHubStore, LocalStore, VersionedStore


class Settings(BaseModel):
    """Settings for the admin functions and CLI."""

    admin_password: str | None = None
    github_token: str | None = None
    github_owner: str | None = None
    github_repo: str | None = None
    github_branch: str = 'main'
    data_dir: str | None = None
    http_timeout: float = Field(default=15, gt=0)

    @property
    def github_configured(self) -> bool:
        return all([self.github_token, self.github_owner, self.github_repo, self.github_branch])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings from the environment.

    Settings are cached after first load. Reads:
        ADMIN_PASSWORD, GITHUB_TOKEN, GITHUB_OWNER (or GITHUB_USERNAME),
        GITHUB_REPO, GITHUB_BRANCH, SOCIETY_DATA_DIR, SOCIETY_HTTP_TIMEOUT

    Example:
        from society.config import get_settings
        settings = get_settings()
        print(settings.github_branch)
    """
    values = {
        'admin_password': os.environ.get('ADMIN_PASSWORD'),
        'github_token': os.environ.get('GITHUB_TOKEN'),
        'github_owner': os.environ.get('GITHUB_OWNER') or os.environ.get('GITHUB_USERNAME'),
        'github_repo': os.environ.get('GITHUB_REPO'),
        'github_branch': os.environ.get('GITHUB_BRANCH') or 'main',
        'data_dir': os.environ.get('SOCIETY_DATA_DIR'),
    }
    if os.environ.get('SOCIETY_HTTP_TIMEOUT'):
        values['http_timeout'] = os.environ['SOCIETY_HTTP_TIMEOUT']
    return Settings(**values)


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Use this after changing environment variables at runtime (tests, CLI
    overrides) so the next get_settings() call rereads them.
    """
    get_settings.cache_clear()


def build_store(settings: Settings) -> VersionedStore:
    """
    Create the store the settings point at.

    A data directory wins over GitHub so admins can work on a local checkout.

    Raises:
        StoreError: If neither a data directory nor GitHub is configured
    """
    if settings.data_dir:
        return LocalStore(settings.data_dir)

    if not settings.github_configured:
        raise StoreError('Server configuration error: Missing GitHub environment variables.')

    return GitHubStore(
        owner=settings.github_owner,
        repo=settings.github_repo,
        branch=settings.github_branch,
        token=settings.github_token,
        timeout=settings.http_timeout,
    )
