"""
Tests for room availability (half-open interval overlap).
"""

import pytest
from datetime import datetime


def D(day, hour=0):
    """January 2025 at the given hour."""
    return datetime(2025, 1, day, hour)


class TestIsRoomAvailable:
    """Overlap rule: existing.check_in < req.check_out AND req.check_in < existing.check_out."""

    def test_empty_room_is_available(self, app, room):
        from models.reservation import is_room_available
        assert is_room_available(room['id'], D(10), D(15)) is True

    def test_back_to_back_is_not_a_conflict(self, app, room, make_reservation):
        from models.reservation import is_room_available
        make_reservation(room['id'], D(10), D(15))

        assert is_room_available(room['id'], D(15), D(18)) is True
        assert is_room_available(room['id'], D(5), D(10)) is True

    @pytest.mark.parametrize('check_in,check_out', [
        (D(12), D(20)),   # overlaps the tail
        (D(5), D(11)),    # overlaps the head
        (D(11), D(13)),   # inside
        (D(1), D(30)),    # contains
        (D(10), D(15)),   # identical
    ])
    def test_overlaps_are_conflicts(self, app, room, make_reservation, check_in, check_out):
        from models.reservation import is_room_available
        make_reservation(room['id'], D(10), D(15))

        assert is_room_available(room['id'], check_in, check_out) is False

    def test_only_same_room_blocks(self, app, room, other_room, make_reservation):
        from models.reservation import is_room_available
        make_reservation(other_room['id'], D(10), D(15))

        assert is_room_available(room['id'], D(10), D(15)) is True

    @pytest.mark.parametrize('status', ['PENDING', 'CONFIRMED', 'CHECKED_IN'])
    def test_blocking_statuses(self, app, room, make_reservation, status):
        from models.reservation import is_room_available
        make_reservation(room['id'], D(10), D(15), status=status)

        assert is_room_available(room['id'], D(12), D(13)) is False

    @pytest.mark.parametrize('status', ['CHECKED_OUT', 'CANCELED'])
    def test_terminal_statuses_never_block(self, app, room, make_reservation, status):
        from models.reservation import is_room_available
        make_reservation(room['id'], D(10), D(15), status=status)

        assert is_room_available(room['id'], D(12), D(13)) is True

    def test_inactive_reservation_does_not_block(self, app, room, make_reservation):
        from models.reservation import is_room_available
        make_reservation(room['id'], D(10), D(15), status='CONFIRMED', is_active=False)

        assert is_room_available(room['id'], D(12), D(13)) is True

    def test_exclude_reservation(self, app, room, make_reservation):
        from models.reservation import is_room_available
        reservation = make_reservation(room['id'], D(10), D(15))

        assert is_room_available(room['id'], D(10), D(16),
                                 exclude_reservation_id=reservation['id']) is True

    def test_time_of_day_is_respected(self, app, room, make_reservation):
        """Checkout at 12:00 and check-in at 14:00 the same day do not collide."""
        from models.reservation import is_room_available
        make_reservation(room['id'], D(10, 14), D(15, 12))

        assert is_room_available(room['id'], D(15, 14), D(17, 12)) is True
        assert is_room_available(room['id'], D(15, 11), D(17, 12)) is False


class TestOverlappingReservations:
    """Tests for the diagnostic overlap query."""

    def test_ordered_by_check_in(self, app, room, make_reservation):
        from models.reservation import get_overlapping_reservations
        late = make_reservation(room['id'], D(20), D(25))
        early = make_reservation(room['id'], D(10), D(15))

        conflicts = get_overlapping_reservations(room['id'], D(1), D(30))

        assert [c['id'] for c in conflicts] == [early['id'], late['id']]
        assert conflicts[0]['room_number'] == 101
        assert conflicts[0]['check_in_date'] == D(10)

    def test_hotel_wide_scan(self, app, room, other_room, make_reservation):
        from models.reservation import get_overlapping_reservations
        make_reservation(room['id'], D(10), D(15))
        make_reservation(other_room['id'], D(12), D(14))

        conflicts = get_overlapping_reservations(None, D(11), D(13))

        assert {c['room_id'] for c in conflicts} == {room['id'], other_room['id']}

    def test_reserved_room_ids_and_available_rooms(self, app, room, other_room, make_reservation):
        from models.reservation import get_reserved_room_ids, get_available_rooms
        make_reservation(room['id'], D(10), D(15))

        assert get_reserved_room_ids(D(11), D(12)) == [room['id']]

        free_ids = [r['id'] for r in get_available_rooms(D(11), D(12))]
        assert room['id'] not in free_ids
        assert other_room['id'] in free_ids


class TestCheckAvailabilityService:
    """Tests for the exposed availability query."""

    def test_available_room_includes_number_and_price(self, app, room):
        from services.reservation_service import check_availability

        result = check_availability(room['id'], '2025-01-10', '2025-01-15')

        assert result['success'] is True
        assert result['data']['is_available'] is True
        assert result['data']['room_number'] == 101
        assert result['data']['room_price'] == 120.0
        assert result['data']['conflicts'] == []
        assert result['data']['check_in_date'] == '2025-01-10T00:00:00'

    def test_unavailable_room_lists_conflicts(self, app, room, make_reservation):
        from services.reservation_service import check_availability
        blocker = make_reservation(room['id'], D(10), D(15))

        result = check_availability(room['id'], '2025-01-12', '2025-01-20')

        assert result['data']['is_available'] is False
        assert 'room_number' not in result['data']
        assert [c['id'] for c in result['data']['conflicts']] == [blocker['id']]
        assert result['message'] == 'Habitación no disponible para las fechas seleccionadas'

    def test_exclude_id(self, app, room, make_reservation):
        from services.reservation_service import check_availability
        reservation = make_reservation(room['id'], D(10), D(15))

        result = check_availability(room['id'], '2025-01-10', '2025-01-16', exclude_id=reservation['id'])

        assert result['data']['is_available'] is True

    def test_invalid_range_rejected(self, app, room):
        from services.reservation_service import check_availability
        from utils.errors import ValidationError

        with pytest.raises(ValidationError):
            check_availability(room['id'], '2025-01-15', '2025-01-10')

    def test_unknown_room(self, app):
        from services.reservation_service import check_availability
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            check_availability('no-such-room', '2025-01-10', '2025-01-15')
