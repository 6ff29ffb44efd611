# src/html_shell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths ---

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the html_shell package (where settings.json lives)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_handlers_dir() -> Path:
        return PathUtils.get_shell_package_root() / "core" / "handlers"

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_user_documents_dir() -> Path:
        """
        Returns the absolute path to the current user's Documents directory.
        """
        return Path.home() / "Documents"

    @staticmethod
    def get_default_user_settings_file() -> Path:
        """Where 'config set' stores overrides when $HTML_SHELL_SETTINGS is not set."""
        return Path.home() / ".html_shell" / "settings.json"

    # --- Helper methods ---

    @staticmethod
    def resolve_export_path(path_str: str) -> Path:
        """
        Absolute paths are used as-is; relative paths are placed in the
        user's Documents directory. Parent directories are created.
        """
        path = Path(path_str).expanduser()
        if not path.is_absolute():
            path = PathUtils.get_user_documents_dir() / path
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Resolved export path: %s", path)
        return path
