"""Guideline file loading.

Guideline schedules are versioned YAML files named {name}.yaml. The user
guidelines directory (settings.json "guidelines_dir") is searched first,
then the files bundled in supportcalc/guidelines/. Parsed schedules are
cached per file for the life of the process; they are immutable.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .config import ConfigError, get_default_guideline, get_user_guidelines_dir
from .schedule import GuidelineError, GuidelineSchedule
from .schemas import GuidelineFile

logger = logging.getLogger(__name__)


class GuidelineNotFoundError(GuidelineError):
    """Raised when no guideline file matches the requested name."""
    pass


def get_bundled_guidelines_dir() -> Path:
    """Directory holding the guideline files shipped with the package."""
    return Path(__file__).parent.parent / "guidelines"


def _resolve_name(name: Optional[str]) -> str:
    if name:
        return name
    try:
        return get_default_guideline()
    except ConfigError as e:
        raise GuidelineError(f"Cannot read default guideline: {e}")


def _search_dirs() -> List[Path]:
    dirs = []
    try:
        user_dir = get_user_guidelines_dir()
    except ConfigError as e:
        raise GuidelineError(f"Cannot read guidelines_dir setting: {e}")
    if user_dir is not None:
        dirs.append(user_dir)
    dirs.append(get_bundled_guidelines_dir())
    return dirs


def list_guidelines() -> List[str]:
    """Names of all available guideline files (user and bundled)."""
    names = set()
    for directory in _search_dirs():
        if directory.is_dir():
            names.update(p.stem for p in directory.glob("*.yaml"))
    return sorted(names)


def find_guideline_path(name: str) -> Path:
    """Resolve a guideline name (or a path to a YAML file) to a file.

    Raises:
        GuidelineNotFoundError: If no matching file exists
    """
    candidate = Path(name).expanduser()
    if candidate.suffix in (".yaml", ".yml") and candidate.is_file():
        return candidate

    for directory in _search_dirs():
        path = directory / f"{name}.yaml"
        if path.is_file():
            return path

    available = ", ".join(list_guidelines()) or "none"
    raise GuidelineNotFoundError(f"Guideline '{name}' not found (available: {available})")


def parse_guideline_file(path: Path) -> GuidelineFile:
    """Read and schema-validate a guideline YAML file.

    Raises:
        GuidelineError: If the file is not valid YAML or fails the schema
    """
    logger.debug(f"Loading guideline file {path}")
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise GuidelineError(f"Invalid YAML in {path}: {e}")

    if not isinstance(raw, dict):
        raise GuidelineError(f"Guideline file {path} must contain a mapping")

    try:
        return GuidelineFile.model_validate(raw)
    except ValidationError as e:
        raise GuidelineError(f"Guideline file {path} failed schema validation:\n{e}")


def schedule_from_file(data: GuidelineFile, validate: bool = True) -> GuidelineSchedule:
    """Build an immutable schedule from a parsed guideline file."""
    return GuidelineSchedule.from_table(
        name=data.name,
        table=data.schedule,
        excess_percentages=data.excess_percentages,
        shared_parenting=data.shared_parenting,
        title=data.title,
        statute=data.statute,
        validate=validate,
    )


@lru_cache(maxsize=None)
def _load_cached(path: Path) -> GuidelineSchedule:
    return schedule_from_file(parse_guideline_file(path))


def load_guideline(name: Optional[str] = None) -> GuidelineSchedule:
    """Load a guideline schedule by name (cached).

    Args:
        name: Guideline name or YAML path (default: settings "guideline",
              falling back to florida-61.30)

    Raises:
        GuidelineNotFoundError: If the guideline cannot be found
        GuidelineError: If the file is malformed, breaks schedule invariants,
            or settings.json cannot be read
    """
    path = find_guideline_path(_resolve_name(name))
    return _load_cached(path.resolve())


def validate_guideline(name: Optional[str] = None) -> List[str]:
    """Check a guideline file without raising on problems.

    Returns:
        List of problems (empty if the guideline is valid)

    Raises:
        GuidelineNotFoundError: If the guideline cannot be found
        GuidelineError: If settings.json cannot be read
    """
    path = find_guideline_path(_resolve_name(name))
    try:
        data = parse_guideline_file(path)
    except GuidelineError as e:
        return [str(e)]
    return schedule_from_file(data, validate=False).check_invariants()
