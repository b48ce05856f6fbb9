"""
Audit helpers.
Builds the before/after payload stored with each reservation audit entry.
"""

from datetime import datetime


def _plain(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def diff_changes(before: dict, after: dict, fields=None) -> dict:
    """
    Compute the audit payload for a mutation.

    Only fields whose value differs are recorded.

    Args:
        before: Entity state before the change
        after: Entity state after the change
        fields: Optional iterable restricting the compared fields

    Returns:
        dict with 'before' and 'after' sub-dicts (empty when nothing changed)

    Example:
        diff_changes({'status': 'PENDING'}, {'status': 'CONFIRMED'})
        # {'before': {'status': 'PENDING'}, 'after': {'status': 'CONFIRMED'}}
    """
    before = before or {}
    after = after or {}
    keys = fields if fields is not None else sorted(set(before) | set(after))

    changes = {'before': {}, 'after': {}}
    for key in keys:
        old = before.get(key)
        new = after.get(key)
        if old != new:
            changes['before'][key] = _plain(old)
            changes['after'][key] = _plain(new)
    return changes


def get_actor_id(user):
    """ID of the acting user (dict with 'id', a plain id, or None for system actions)."""
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get('id')
    return getattr(user, 'id', user)
