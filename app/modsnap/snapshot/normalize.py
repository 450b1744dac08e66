"""File name normalization.

Snapshot entries are compared after normalization so that names the
filesystem considers identical are treated as the same file.
"""

import logging
import os
import unicodedata
from collections.abc import Callable
from pathlib import Path

from modsnap.core.config import CasePolicy

logger = logging.getLogger(__name__)


def identity(value: str) -> str:
    """Return the name unchanged."""
    return value


def is_case_insensitive(path: Path) -> bool:
    """Check whether the filesystem holding a path ignores case.

    Looks for the nearest existing path component containing letters and
    checks if its case-swapped spelling resolves to the same file.

    Args:
        path: Path on the filesystem to check.

    Returns:
        True if the filesystem is case-insensitive. False when it is not,
        or when no suitable component exists to check.
    """
    component = path.absolute()
    while not component.exists() and component != component.parent:
        component = component.parent

    while component.name.swapcase() == component.name:
        if component == component.parent:
            logger.debug("No component to test case sensitivity at %s", path)
            return False
        component = component.parent

    swapped = component.with_name(component.name.swapcase())
    try:
        return os.path.samefile(component, swapped)
    except OSError:
        return False


def make_normalize_func(
    base_path: str,
    *,
    case: CasePolicy = "auto",
    unicode: bool = False,
    separators: bool = False,
) -> Callable[[str], str]:
    """Create the normalization for names below a base path.

    Args:
        base_path: Directory whose names will be normalized.
        case: "insensitive" folds case, "sensitive" keeps it, "auto"
            decides by probing the filesystem at base_path.
        unicode: Apply NFC normalization.
        separators: Turn backslashes into forward slashes.

    Returns:
        A deterministic str -> str function.
    """
    fold_case = case == "insensitive" or (case == "auto" and is_case_insensitive(Path(base_path)))
    logger.debug(
        "Normalization for %s: fold_case=%s unicode=%s separators=%s",
        base_path,
        fold_case,
        unicode,
        separators,
    )

    steps: list[Callable[[str], str]] = []
    if separators:
        steps.append(lambda value: value.replace("\\", "/"))
    if unicode:
        steps.append(lambda value: unicodedata.normalize("NFC", value))
    if fold_case:
        steps.append(str.casefold)

    if not steps:
        return identity

    def normalize(value: str) -> str:
        for step in steps:
            value = step(value)
        return value

    return normalize
