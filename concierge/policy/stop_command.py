# The MIT License (MIT)
# Copyright © 2025 Entrius

from typing import Iterable

from concierge.classes import Comment
from concierge.constants import STOP_COMMAND


def stop_command_for(bot_login: str) -> str:
    """The opt-out directive addressed to ``bot_login``, e.g. ``@cesium-concierge stop``."""
    return f"@{bot_login} {STOP_COMMAND}".lower()


def contains_stop_command(comments: Iterable[Comment], bot_login: str) -> bool:
    """True if any comment not written by the bot itself asks the bot to stop.

    The body match is case-insensitive; the author match is exact.
    """
    needle = stop_command_for(bot_login)
    for comment in comments:
        if comment.author_login != bot_login and needle in comment.body.lower():
            return True
    return False
