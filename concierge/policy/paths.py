# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Classify changed file paths against the changelog convention and restricted folders."""

import re
from typing import Iterable, Optional, Sequence

import bittensor as bt

from concierge.constants import CHANGELOG_FILE_PATTERN

_CHANGELOG_RE = re.compile(CHANGELOG_FILE_PATTERN)


def is_changelog_file(path: str) -> bool:
    """True if ``path`` is the top-level ``CHANGES.md`` (case-sensitive, anchored at the start)."""
    return _CHANGELOG_RE.match(path) is not None


def matches_any_restricted_folder(paths: Iterable[str], folders: Optional[Sequence[str]]) -> bool:
    """Check whether any changed path starts with any restricted folder prefix.

    This is a plain string prefix test, so ``folders`` may hold directory or file
    prefixes. An empty or missing ``folders`` never matches.

    Args:
        paths (Iterable[str]): Changed file paths.
        folders (Optional[Sequence[str]]): Restricted path prefixes.

    Returns:
        bool: True on the first path/prefix match.
    """
    if not folders:
        return False

    for path in paths:
        for folder in folders:
            if path.startswith(folder):
                bt.logging.debug(f"File {path} matched restricted folder {folder}")
                return True

    bt.logging.debug("No files matched restricted folders")
    return False
