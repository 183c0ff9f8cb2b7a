"""Local clone of the ruby-advisory-db."""

import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import DatabaseSyncError
from ..core.store import AdvisoryStore
from ..utils.logging import get_logger

URL = "https://github.com/rubysec/ruby-advisory-db.git"

DEFAULT_PATH = Path.home() / ".local" / "share" / "ruby-advisory-db"

GIT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"


@dataclass
class DatabaseConfig:
    """Where the advisory database lives and where it is fetched from."""

    path: Path = field(default_factory=lambda: DEFAULT_PATH)
    url: str = URL
    branch: str = "master"
    timeout: float = 300.0

    def __post_init__(self) -> None:
        self.path = Path(self.path).expanduser()
        if not self.url:
            raise ValueError("Database URL cannot be empty")

    @property
    def gems_path(self) -> Path:
        """Directory holding one subdirectory of advisories per gem."""
        return self.path / "gems"


class AdvisoryDatabase:
    """Manages the git clone that backs an AdvisoryStore."""

    def __init__(self, config: Optional[DatabaseConfig] = None) -> None:
        self.config = config or DatabaseConfig()
        self.logger = get_logger("AdvisoryDatabase")

    @property
    def path(self) -> Path:
        return self.config.path

    def exists(self) -> bool:
        return self.config.gems_path.is_dir()

    def open_store(self) -> AdvisoryStore:
        """Open a fresh store over the current contents of the clone.

        Raises:
            NotADirectory: If the database has not been downloaded
        """
        return AdvisoryStore(self.config.gems_path)

    def download(self) -> None:
        """Clone the advisory database.

        Raises:
            DatabaseSyncError: If the clone fails
        """
        self.config.path.parent.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Downloading {self.config.url} into {self.config.path}")
        self._git(["clone", "--quiet", self.config.url, str(self.config.path)])

    def update(self) -> None:
        """Pull the latest advisories, cloning first if there is no local copy.

        Raises:
            DatabaseSyncError: If git fails
        """
        if not (self.config.path / ".git").is_dir():
            self.download()
            return

        self.logger.info(f"Updating {self.config.path}")
        self._git(["pull", "--quiet", "origin", self.config.branch], cwd=self.config.path)

    def last_updated(self) -> datetime:
        """Author date of the most recent commit in the clone.

        Raises:
            DatabaseSyncError: If git fails or prints an unexpected date
        """
        output = self._git(["log", "-1", "--format=%ad"], cwd=self.config.path).strip()
        try:
            return datetime.strptime(output, GIT_DATE_FORMAT)
        except ValueError:
            pass
        try:
            return parsedate_to_datetime(output)
        except (TypeError, ValueError):
            raise DatabaseSyncError(f"Unexpected git date: {output!r}") from None

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> str:
        command = ["git", *args]
        self.logger.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            raise DatabaseSyncError(f"git {args[0]} failed: {e}") from e

        if result.returncode != 0:
            raise DatabaseSyncError(
                f"git {args[0]} failed with exit code {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout

    def __str__(self) -> str:
        return str(self.config.path)
