# src/textrange/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving package and user paths.
    """

    # --- Package specific paths ---

    @staticmethod
    def get_package_root() -> Path:
        """Returns the absolute path of the installed 'textrange' package directory."""
        return Path(__file__).resolve().parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        """Returns the path to the settings.json shipped with the package."""
        return PathUtils.get_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_user_config_dir() -> Path:
        """
        Returns the path to the user's .textrange config directory.
        (e.g., ~/.textrange/)
        """
        return Path.home() / ".textrange"

    @staticmethod
    def get_user_settings_file() -> Path:
        """Returns the path to the optional user override settings file."""
        return PathUtils.get_user_config_dir() / "settings.json"
