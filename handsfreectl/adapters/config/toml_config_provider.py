"""TOML-based configuration provider.

Config loading priority (highest to lowest):
1. Explicit path passed with --config
2. Global: ~/.config/handsfree/handsfreectl.toml
3. Built-in defaults
"""

import logging
from pathlib import Path

from handsfreectl.domain.config import HandsfreeConfig
from handsfreectl.shared.config_io import get_global_config_path, load_config_data

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from a TOML file.

    Missing files yield the built-in defaults. Invalid files are reported
    with a warning and ignored, so a broken config never stops a hotkey
    from reaching the daemon.
    """

    def load(self, path: Path | None = None) -> HandsfreeConfig:
        """Load configuration, falling back to defaults.

        Args:
            path: Config file to read (default: global config path)

        Returns:
            HandsfreeConfig with file values merged over defaults
        """
        config_path = path or get_global_config_path()
        config = HandsfreeConfig.default()

        if not config_path.exists():
            logger.debug("No config file at %s, using defaults", config_path)
            return config

        try:
            data = load_config_data(config_path)
            config = HandsfreeConfig.from_partial(config, data)
            logger.debug("Loaded config from %s", config_path)
        except (FileNotFoundError, ValueError) as e:
            logger.warning(
                "Failed to parse config at %s: %s. Using default configuration.",
                config_path,
                e,
            )
            return HandsfreeConfig.default()

        return config
