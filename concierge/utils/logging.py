import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, List

import bittensor as bt

if TYPE_CHECKING:
    from concierge.classes import CommentPostIntent

EVENTS_LEVEL_NUM = 38
EVENTS_LOGGER_NAME = 'concierge.events'
EVENTS_FILE_NAME = 'posted_comments.log'
DEFAULT_LOG_BACKUP_COUNT = 10
DEFAULT_EVENTS_RETENTION_SIZE = 2 * 1024 * 1024  # 2 MB
PREVIEW_LENGTH = 60


def _log_event(self, message, *args, **kws):
    if self.isEnabledFor(EVENTS_LEVEL_NUM):
        self._log(EVENTS_LEVEL_NUM, message, args, **kws)


def setup_events_logger(events_dir, events_retention_size=DEFAULT_EVENTS_RETENTION_SIZE):
    """Logger whose ``event()`` records each posted comment in ``<events_dir>/posted_comments.log``.

    Calling it again for the same directory reuses the existing file handler.
    """
    logging.addLevelName(EVENTS_LEVEL_NUM, 'EVENT')
    logging.Logger.event = _log_event

    logger = logging.getLogger(EVENTS_LOGGER_NAME)
    logger.setLevel(EVENTS_LEVEL_NUM)
    logger.propagate = False

    events_path = Path(events_dir)
    events_path.mkdir(parents=True, exist_ok=True)
    log_file = str((events_path / EVENTS_FILE_NAME).resolve())

    if any(getattr(handler, 'baseFilename', None) == log_file for handler in logger.handlers):
        return logger

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)s | %(message)s', datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(file_handler)

    return logger


def _preview(body: str) -> str:
    first_line = body.splitlines()[0] if body else ''
    if len(first_line) > PREVIEW_LENGTH:
        return first_line[:PREVIEW_LENGTH] + '...'
    return first_line


def log_comment_intents(repository_name: str, intents: List['CommentPostIntent']) -> None:
    """Log the comments decided for a repository."""
    if not intents:
        bt.logging.info(f'  └─ {repository_name}: nothing to post')
        return

    bt.logging.info(f'  ├─ {repository_name}: {len(intents)} comment(s) to post')
    for intent in intents:
        bt.logging.debug(f'  │   {intent.target_url}  {_preview(intent.body)}')
