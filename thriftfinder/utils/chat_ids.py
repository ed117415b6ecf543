"""
Canonical chat ids: the two participant uids sorted and joined by "_".

Both participants must compute the same key, so every call site goes
through these helpers instead of concatenating strings.
"""
from typing import Iterable, Tuple

SEPARATOR = "_"


def derive_chat_id(uid_a: str, uid_b: str) -> str:
    """Canonical chat id for two users; independent of argument order."""
    if not uid_a or not uid_b:
        raise ValueError("Both participant uids are required")
    return SEPARATOR.join(sorted([uid_a, uid_b]))


def split_chat_id(chat_id: str) -> Tuple[str, str]:
    """Return the two participant uids encoded in a chat id."""
    parts = (chat_id or "").split(SEPARATOR)
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Malformed chat id: {chat_id!r}")
    return parts[0], parts[1]


def other_participant(chat_id: str, uid: str) -> str:
    """The participant of chat_id that is not uid."""
    first, second = split_chat_id(chat_id)
    return second if first == uid else first


def is_canonical(chat_id: str, participants: Iterable[str]) -> bool:
    """True when participants are exactly two uids whose canonical join is chat_id."""
    members = list(participants or [])
    if len(members) != 2:
        return False
    try:
        return derive_chat_id(members[0], members[1]) == chat_id
    except ValueError:
        return False
