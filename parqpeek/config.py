"""
User settings

Settings live in a JSON file (``~/.parqpeek_config`` by default). Missing
keys keep their defaults and unknown keys are ignored, so an old or
hand-edited file never stops the viewer from starting.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".parqpeek_config"
DEFAULT_LOG_FILE = Path.home() / ".config" / "parqpeek" / "parqpeek.log"


@dataclass
class Settings:
    batch_size: int = 100
    visible_columns: int = 10
    preview_limit: int = 1000
    default_query: str = "SELECT * FROM data LIMIT 100"
    default_save_path: str = "output.parquet"
    log_file: str = str(DEFAULT_LOG_FILE)
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "Settings":
        """
        Load settings from ``path``, falling back to defaults

        A missing file is not an error. A malformed file is logged and
        ignored.
        """
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_FILE
        settings = cls()
        if not config_path.exists():
            return settings

        try:
            config = json.loads(config_path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Failed to load config %s: %s", config_path, e)
            return settings

        if not isinstance(config, dict):
            logger.warning("Ignoring config %s: expected a JSON object", config_path)
            return settings

        for field in fields(cls):
            if field.name not in config:
                continue
            value = config[field.name]
            try:
                setattr(settings, field.name, field.type(value) if field.type in (int, str) else value)
            except (TypeError, ValueError):
                logger.warning("Ignoring config key %s=%r", field.name, value)

        for name in ("batch_size", "visible_columns", "preview_limit"):
            if getattr(settings, name) < 1:
                logger.warning("Ignoring config key %s=%r (must be >= 1)", name, getattr(settings, name))
                setattr(settings, name, getattr(cls, name))

        return settings

    def save(self, path: Union[str, Path, None] = None) -> None:
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_FILE
        config_path.write_text(json.dumps(asdict(self), indent=2))

    def override(self, batch_size: Optional[int] = None, log_file: Optional[str] = None) -> "Settings":
        """Apply command-line overrides in place and return self."""
        if batch_size is not None:
            self.batch_size = batch_size
        if log_file is not None:
            self.log_file = log_file
        return self
