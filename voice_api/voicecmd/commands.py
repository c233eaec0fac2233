from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import ValidationError

from .config import settings
from .logging_utils import setup_logger
from .models import CommandCatalog, CommandDefinition

logger = setup_logger("voicecmd.commands", settings.log_level)

DEFAULT_CATALOGS_FILE = Path(__file__).parent / "catalogs.yml"


class UnknownCatalogError(KeyError):
    """Raised when a screen asks for a catalog that was never declared."""


def load_catalogs(catalogs_file: Path) -> Dict[str, CommandCatalog]:
    """
    Read command catalog definitions from a YAML file.

    Args:
        catalogs_file: YAML mapping of catalog name to a list of
            ``{command, aliases, description}`` entries.

    Returns:
        Dict[str, CommandCatalog]: catalogs in file order (empty on a missing
        or empty file).

    Processing:
        1. Check the file exists
        2. Parse the YAML
        3. Build a CommandDefinition per entry
        4. Skip entries that fail validation, keep the rest
    """
    if not catalogs_file.exists():
        logger.warning(f"Catalog file not found: {catalogs_file}")
        return {}
    data = yaml.safe_load(catalogs_file.read_text(encoding="utf-8"))
    if not data:
        return {}

    catalogs = {}
    for name, entries in data.items():
        commands: List[CommandDefinition] = []
        for item in entries or []:
            try:
                commands.append(CommandDefinition(**item))
            except (TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed command in '{name}': {item!r} ({e})")
                continue
        catalogs[str(name)] = CommandCatalog(name=str(name), commands=tuple(commands))
    logger.debug(f"Loaded {len(catalogs)} catalogs from {catalogs_file}")
    return catalogs


@lru_cache(maxsize=None)
def _cached_catalogs(catalogs_file: str) -> Dict[str, CommandCatalog]:
    return load_catalogs(Path(catalogs_file))


def get_catalogs() -> Dict[str, CommandCatalog]:
    """All catalogs from the configured file, loaded once per process."""
    return _cached_catalogs(settings.catalogs_file or str(DEFAULT_CATALOGS_FILE))


def get_catalog(name: str) -> CommandCatalog:
    catalogs = get_catalogs()
    if name not in catalogs:
        raise UnknownCatalogError(name)
    return catalogs[name]
