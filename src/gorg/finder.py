"""Interactive search loop tying the index view to the prompt session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from gorg.index import IndexView, Match
from gorg.prompt import Key, PromptEvent, PromptSession

LOGGER = logging.getLogger(__name__)


def find_interactive(
    view: IndexView,
    query: str,
    max_items: int,
    open_session: Callable[[str], PromptSession],
    keys: Iterable[Key],
) -> str | None:
    """Let the user pick one record; return it, or None when cancelled.

    When the seed query already matches exactly one record, that record is
    returned without opening a session.
    """
    results: list[Match] = []
    view.find_matches(query, results)
    if len(results) == 1:
        LOGGER.debug("Single match for seed query, skipping prompt")
        return results[0].record
    del results[max_items:]

    with open_session(query) as session:
        session.render(match.record for match in results)
        for key in keys:
            event = session.handle_key(key)
            if event is None:
                continue
            if event is PromptEvent.SELECTION_DONE:
                selected = session.selected
                if selected < len(results):
                    return results[selected].record
                return None
            if event is PromptEvent.EXIT:
                return None
            if event is PromptEvent.PROMPT_UPDATED:
                view.find_matches(session.text, results, limit=max_items)
            session.render(match.record for match in results)
    return None
