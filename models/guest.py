"""
Companion guest payload stored with a reservation.

Guests are persisted as a JSON list on the reservation row. The core does not
interpret them beyond checking that each entry is well formed.
"""

import json

DOCUMENT_TYPES = ('DNI', 'PASSPORT', 'FOREIGNER_CARD')

GUEST_FIELDS = (
    'name',
    'age',
    'document_id',
    'document_type',
    'phone',
    'email',
    'birth_date',
    'additional_info',
)


def normalize_guests(guests) -> tuple:
    """
    Validate and normalize a list of companion guests.

    Unknown keys are dropped, empty strings become None.

    Args:
        guests: List of guest dicts (or None)

    Returns:
        Tuple of (is_valid, normalized list, error_detail)
    """
    if guests is None:
        return True, [], ''

    if not isinstance(guests, list):
        return False, [], 'se esperaba una lista'

    normalized = []
    for index, guest in enumerate(guests, start=1):
        if not isinstance(guest, dict):
            return False, [], f'el huésped {index} no es un objeto'

        entry = {}
        for field in GUEST_FIELDS:
            value = guest.get(field)
            if isinstance(value, str):
                value = value.strip() or None
            entry[field] = value

        if not entry['name']:
            return False, [], f'el huésped {index} no tiene nombre'

        if entry['age'] is not None:
            try:
                entry['age'] = int(entry['age'])
            except (TypeError, ValueError):
                return False, [], f'la edad del huésped {index} no es válida'
            if entry['age'] < 0:
                return False, [], f'la edad del huésped {index} no es válida'

        if entry['document_type'] and entry['document_type'] not in DOCUMENT_TYPES:
            return False, [], f'tipo de documento inválido para el huésped {index}'

        normalized.append(entry)

    return True, normalized, ''


def serialize_guests(guests: list) -> str:
    """Serialize a normalized guest list for storage."""
    return json.dumps(guests or [], ensure_ascii=False)


def deserialize_guests(raw: str) -> list:
    """Parse the stored guest list (empty list when unset)."""
    if not raw:
        return []
    return json.loads(raw)
