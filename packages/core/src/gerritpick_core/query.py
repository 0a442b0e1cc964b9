"""Gerrit search-query construction.

The query is passed to the transport verbatim, so nothing here escapes or
validates user input.
"""

from __future__ import annotations

INTERACTIVE_LIMIT = 200


def create_query(include_closed: bool, project: str | None, text: str, limit: int | None = None) -> str:
    query = ""
    if limit:
        query += f"limit:{limit} "
    if not include_closed:
        query += "status:open "
    if project:
        query += f"project:{project} "
    query += text
    return query


def topic_query(topic: str) -> str:
    return f"status:open topic:{topic}"
