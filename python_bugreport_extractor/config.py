import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent.parent / "config/config.toml"


@dataclass
class Config:
    """Settings for the command line front end"""

    log_level: str = "WARNING"
    encoding: str = "utf-8"
    parse_header: bool = True
    top_processes: int = 10


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load the TOML configuration, falling back to the defaults for a missing file or key.

    Raises:
        tomllib.TOMLDecodeError: if the file is not valid TOML
    """
    path = Path(path) if path is not None else CONFIG_PATH
    if not path.exists():
        logger.info("No config file at %s, using defaults", path)
        return Config()

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    known = {field.name for field in fields(Config)}
    for key in raw.keys() - known:
        logger.warning("Ignoring unknown config key '%s' in %s", key, path)
    return Config(**{key: value for key, value in raw.items() if key in known})
