"""Versioned store clients for the society data files.

The society keeps its data as JSON files in a git repository. Every change
is a commit covering all the files it touches, so readers never see players
updated without the matching ledger.

Two implementations:
    GitHubStore  -- GitHub contents API for reads, git data API for commits
    LocalStore   -- a plain directory, for local admin work and tests
"""

import base64
import json
import logging
import os
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import requests

from .errors import StoreError
from .utils import load_json

logger = logging.getLogger('society.store')

GITHUB_API_URL = 'https://api.github.com'


@dataclass(frozen=True)
class FileChange:
    """New content for one file in a commit."""

    path: str
    content: str


class VersionedStore(ABC):
    """Read JSON by path and commit several files as one revision."""

    @abstractmethod
    def read(self, path: str, revision: str | None = None) -> Any | None:
        """
        Read and parse a JSON file.

        Returns None when the file does not exist at that revision.
        Raises StoreError for any other failure.
        """

    @abstractmethod
    def revision(self) -> str | None:
        """Identifier of the current head revision."""

    @abstractmethod
    def commit_all(
        self,
        message: str,
        files: list[FileChange],
        base_revision: str | None = None,
    ) -> str:
        """
        Apply all files as a single revision and return its identifier.

        If base_revision is given the commit is refused when the head has
        moved past it. On failure the store stays at its prior revision.
        """

    def read_collection(
        self,
        path: str,
        default: list | None = None,
        revision: str | None = None,
    ) -> list:
        """
        Read a JSON array, applying a default when the file is missing.

        Args:
            path: File path inside the store
            default: Returned (copied) when the file does not exist. None
                means the file is required.
            revision: Revision to read at (default: head)

        Raises:
            StoreError: File missing with no default, or not a JSON array
        """
        data = self.read(path, revision=revision)
        if data is None:
            if default is None:
                raise StoreError(f'Required file not found: {path}')
            logger.warning(f'File not found at {path}, using default')
            return deepcopy(default)
        if not isinstance(data, list):
            raise StoreError(f'Expected a JSON array in {path}')
        return data

    def close(self) -> None:
        """Release any connections held by the store."""


class GitHubStore(VersionedStore):
    """Store backed by a branch of a GitHub repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str,
        token: str,
        timeout: float = 15,
        session: requests.Session | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'Golf-Society-Admin',
        })

    def close(self) -> None:
        """Close the HTTP session if this store created it."""
        if self._owns_session:
            self.session.close()

    @property
    def repo_url(self) -> str:
        return f'{GITHUB_API_URL}/repos/{self.owner}/{self.repo}'

    def _request(self, method: str, endpoint: str, allow_404: bool = False, **kwargs) -> dict | None:
        """Call the GitHub API and return the decoded JSON body."""
        url = f'{self.repo_url}/{endpoint}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f'GitHub request failed: {method} {endpoint}: {e}')
            raise StoreError(f'GitHub request failed: {e}') from e

        if response.status_code == 404 and allow_404:
            return None
        if response.status_code >= 400:
            logger.error(f'GitHub API error {response.status_code} on {method} {endpoint}: {response.text}')
            raise StoreError(f'GitHub API error {response.status_code}: {response.text}')
        return response.json()

    def read(self, path: str, revision: str | None = None) -> Any | None:
        data = self._request(
            'GET', f'contents/{path}', allow_404=True,
            params={'ref': revision or self.branch},
        )
        if data is None:
            return None

        encoded = data.get('content')
        if not encoded:
            # Files over 1MB come back without inline content
            blob = self._request('GET', f"git/blobs/{data['sha']}")
            encoded = blob['content']

        try:
            return json.loads(base64.b64decode(encoded).decode('utf-8'))
        except (ValueError, UnicodeDecodeError) as e:
            raise StoreError(f'Invalid JSON in {path}: {e}') from e

    def revision(self) -> str | None:
        data = self._request('GET', f'git/ref/heads/{self.branch}', allow_404=True)
        if data is None:
            return None
        return data['object']['sha']

    def commit_all(
        self,
        message: str,
        files: list[FileChange],
        base_revision: str | None = None,
    ) -> str:
        # 1. Parent commit and its tree
        base_sha = base_revision or self.revision()
        if base_sha is None:
            raise StoreError(f'Branch not found: {self.branch}')
        base_commit = self._request('GET', f'git/commits/{base_sha}')

        # 2. One blob per file
        blob_shas = [
            self._request('POST', 'git/blobs', json={'content': f.content, 'encoding': 'utf-8'})['sha']
            for f in files
        ]

        # 3. Tree on top of the parent tree
        tree = self._request('POST', 'git/trees', json={
            'base_tree': base_commit['tree']['sha'],
            'tree': [
                {'path': f.path, 'mode': '100644', 'type': 'blob', 'sha': sha}
                for f, sha in zip(files, blob_shas)
            ],
        })

        # 4. Commit
        commit = self._request('POST', 'git/commits', json={
            'message': message,
            'tree': tree['sha'],
            'parents': [base_sha],
        })

        # 5. Move the branch; a non-fast-forward is rejected by GitHub
        try:
            self._request('PATCH', f'git/refs/heads/{self.branch}', json={
                'sha': commit['sha'],
                'force': False,
            })
        except StoreError as e:
            raise StoreError(
                f'Could not update {self.branch}; it may have changed since the data was read. {e.message}'
            ) from e

        logger.info(f"Committed {len(files)} file(s) to {self.branch}: {message} ({commit['sha'][:7]})")
        return commit['sha']


class LocalStore(VersionedStore):
    """Store backed by a local directory of JSON files.

    The revision is a counter kept in a .revision file next to the data.
    """

    REVISION_FILE = '.revision'
    HISTORY_FILE = '.history'

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def read(self, path: str, revision: str | None = None) -> Any | None:
        if revision is not None and revision != self.revision():
            raise StoreError(f'Revision {revision} is not available in a local store')

        file_path = self.root / path
        if not file_path.exists():
            return None
        try:
            return load_json(file_path)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f'Failed to read {path}: {e}') from e

    def revision(self) -> str | None:
        revision_path = self.root / self.REVISION_FILE
        if not revision_path.exists():
            return '0'
        return revision_path.read_text(encoding='utf-8').strip() or '0'

    def commit_all(
        self,
        message: str,
        files: list[FileChange],
        base_revision: str | None = None,
    ) -> str:
        current = self.revision()
        if base_revision is not None and base_revision != current:
            raise StoreError(
                f'Store has changed since the data was read (at {base_revision}, now {current})'
            )

        try:
            self._write_files(files)
        except OSError as e:
            logger.error(f'Local commit failed, previous files restored: {e}')
            raise StoreError(f'Failed to commit files: {e}') from e

        new_revision = str(int(current) + 1)
        (self.root / self.REVISION_FILE).write_text(new_revision, encoding='utf-8')
        with open(self.root / self.HISTORY_FILE, 'a', encoding='utf-8') as f:
            f.write(f'{new_revision}\t{message}\n')

        logger.info(f'Committed {len(files)} file(s) locally: {message} (r{new_revision})')
        return new_revision

    def _write_files(self, files: list[FileChange]) -> None:
        """Stage every file, then swap them in, restoring the old ones on error."""
        staged: list[tuple[Path, Path]] = []
        replaced: list[tuple[Path, Path | None]] = []

        try:
            for change in files:
                target = self.root / change.path
                target.parent.mkdir(parents=True, exist_ok=True)
                with NamedTemporaryFile('w', dir=target.parent, delete=False, suffix='.tmp', encoding='utf-8') as tmp:
                    staged.append((Path(tmp.name), target))
                    tmp.write(change.content)
                    tmp.flush()
                    os.fsync(tmp.fileno())

            for tmp_path, target in staged:
                backup = None
                if target.exists():
                    backup = target.with_name(target.name + '.bak')
                    os.replace(target, backup)
                replaced.append((target, backup))
                os.replace(tmp_path, target)
        except OSError:
            for target, backup in reversed(replaced):
                if backup is not None:
                    os.replace(backup, target)
                elif target.exists():
                    target.unlink()
            raise
        finally:
            for tmp_path, _ in staged:
                if tmp_path.exists():
                    tmp_path.unlink()

        for _, backup in replaced:
            if backup is not None and backup.exists():
                backup.unlink()
