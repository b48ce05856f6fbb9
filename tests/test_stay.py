"""
Tests for late checkout and stay extension.
"""

import pytest
from datetime import datetime


class TestApplyLateCheckout:
    """Tests for apply_late_checkout."""

    def test_moves_checkout_time(self, app, room, user, make_reservation):
        from services.reservation_service import apply_late_checkout
        from models.reservation import get_reservation_by_id
        from models.audit_log import get_audit_logs

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12),
                                status='CHECKED_IN', observations='VIP')

        result = apply_late_checkout(mine['id'], '15:30', user, notes='Vuelo nocturno')

        assert result['message'] == 'Late checkout aplicado correctamente. Nueva hora de salida: 15:30'
        stored = get_reservation_by_id(mine['id'])
        assert stored['check_out_date'] == datetime(2025, 1, 15, 15, 30)
        assert stored['applied_late_checkout'] is True
        assert stored['observations'] == 'VIP\nVuelo nocturno'

        log = get_audit_logs(entity_id=mine['id'], action='UPDATE')[0]
        assert log['changes']['after']['check_out_date'] == '2025-01-15T15:30:00'

    def test_conflict_names_blocking_date_and_time(self, app, room, user, make_reservation):
        from services.reservation_service import apply_late_checkout
        from models.reservation import get_reservation_by_id
        from utils.errors import SchedulingConflictError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12),
                                status='CONFIRMED')
        make_reservation(room['id'], datetime(2025, 1, 15, 14), datetime(2025, 1, 17, 12), status='PENDING')

        with pytest.raises(SchedulingConflictError) as exc_info:
            apply_late_checkout(mine['id'], '16:00', user)

        assert '15/01/2025' in exc_info.value.message
        assert '14:00' in exc_info.value.message
        assert get_reservation_by_id(mine['id'])['check_out_date'] == datetime(2025, 1, 15, 12)

    def test_next_guest_after_new_time_is_fine(self, app, room, user, make_reservation):
        from services.reservation_service import apply_late_checkout

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12),
                                status='CONFIRMED')
        make_reservation(room['id'], datetime(2025, 1, 15, 16), datetime(2025, 1, 17, 12), status='PENDING')

        result = apply_late_checkout(mine['id'], '16:00', user)

        assert result['data']['check_out_date'] == '2025-01-15T16:00:00'

    @pytest.mark.parametrize('new_time', ['25:00', '3pm', '15', '', None])
    def test_malformed_time(self, app, room, user, make_reservation, new_time):
        from services.reservation_service import apply_late_checkout
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12))

        with pytest.raises(ValidationError, match='HH:mm'):
            apply_late_checkout(mine['id'], new_time, user)

    @pytest.mark.parametrize('new_time', ['12:00', '11:00'])
    def test_new_time_must_be_later(self, app, room, user, make_reservation, new_time):
        from services.reservation_service import apply_late_checkout
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12))

        with pytest.raises(ValidationError, match='posterior'):
            apply_late_checkout(mine['id'], new_time, user)

    def test_only_once(self, app, room, user, make_reservation):
        from services.reservation_service import apply_late_checkout
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12))
        apply_late_checkout(mine['id'], '14:00', user)

        with pytest.raises(ValidationError, match='múltiples'):
            apply_late_checkout(mine['id'], '16:00', user)

    @pytest.mark.parametrize('status', ['PENDING', 'CHECKED_OUT', 'CANCELED'])
    def test_status_restricted(self, app, room, user, make_reservation, status):
        from services.reservation_service import apply_late_checkout
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12), status=status)

        with pytest.raises(ValidationError, match=status):
            apply_late_checkout(mine['id'], '15:00', user)

    def test_not_found(self, app, user):
        from services.reservation_service import apply_late_checkout
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            apply_late_checkout('missing', '15:00', user)


class TestRemoveLateCheckout:
    """Tests for remove_late_checkout."""

    def test_restores_default_time(self, app, room, user, make_reservation):
        from services.reservation_service import apply_late_checkout, remove_late_checkout
        from models.reservation import get_reservation_by_id

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12))
        apply_late_checkout(mine['id'], '17:00', user)

        result = remove_late_checkout(mine['id'], user)

        assert result['success'] is True
        stored = get_reservation_by_id(mine['id'])
        assert stored['check_out_date'] == datetime(2025, 1, 15, 12)
        assert stored['applied_late_checkout'] is False

    def test_uses_configured_time(self, app, room, user, make_reservation):
        from services.reservation_service import apply_late_checkout, remove_late_checkout

        app.config['DEFAULT_CHECKOUT_TIME'] = '11:00'
        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12))
        apply_late_checkout(mine['id'], '17:00', user)

        result = remove_late_checkout(mine['id'], user)

        assert result['data']['check_out_date'] == '2025-01-15T11:00:00'

    def test_requires_applied_late_checkout(self, app, room, user, make_reservation):
        from services.reservation_service import remove_late_checkout
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 15, 12))

        with pytest.raises(ValidationError, match='no tiene Late Checkout'):
            remove_late_checkout(mine['id'], user)


class TestExtendStay:
    """Tests for extend_stay."""

    def test_conflict_names_nearest_blocker(self, app, room, user, make_reservation):
        """A=[10,15) CHECKED_IN, B=[15,18) PENDING: extending A to the 16th cites B's check-in."""
        from services.reservation_service import extend_stay
        from utils.errors import SchedulingConflictError

        a = make_reservation(room['id'], datetime(2025, 1, 10), datetime(2025, 1, 15), status='CHECKED_IN')
        b = make_reservation(room['id'], datetime(2025, 1, 15), datetime(2025, 1, 18), status='PENDING')
        make_reservation(room['id'], datetime(2025, 1, 18), datetime(2025, 1, 20), status='CONFIRMED')

        with pytest.raises(SchedulingConflictError) as exc_info:
            extend_stay(a['id'], '2025-01-16', user)

        assert '15/01/2025' in exc_info.value.message
        assert exc_info.value.context['conflicting_reservation_id'] == b['id']

    def test_nearest_blocker_first_when_several(self, app, room, user, make_reservation):
        from services.reservation_service import extend_stay
        from utils.errors import SchedulingConflictError

        a = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 12, 12))
        make_reservation(room['id'], datetime(2025, 1, 16, 14), datetime(2025, 1, 18, 12))
        nearest = make_reservation(room['id'], datetime(2025, 1, 13, 14), datetime(2025, 1, 14, 12))

        with pytest.raises(SchedulingConflictError) as exc_info:
            extend_stay(a['id'], '2025-01-20', user)

        assert exc_info.value.context['conflicting_reservation_id'] == nearest['id']
        assert '13/01/2025' in exc_info.value.message

    def test_date_only_keeps_checkout_time(self, app, room, user, make_reservation):
        from services.reservation_service import extend_stay
        from models.audit_log import get_audit_logs

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 12, 12),
                                status='CHECKED_IN')

        result = extend_stay(mine['id'], '2025-01-14', user, notes='Extiende por trabajo')

        assert result['message'] == 'Estadía extendida correctamente hasta el 14/01/2025'
        assert result['data']['check_out_date'] == '2025-01-14T12:00:00'
        assert result['data']['observations'] == 'Extiende por trabajo'
        assert get_audit_logs(entity_id=mine['id'], action='UPDATE')

    def test_explicit_time_is_used(self, app, room, user, make_reservation):
        from services.reservation_service import extend_stay

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 12, 12))

        result = extend_stay(mine['id'], '2025-01-14T10:00:00', user)

        assert result['data']['check_out_date'] == '2025-01-14T10:00:00'

    def test_back_to_back_extension_allowed(self, app, room, user, make_reservation):
        from services.reservation_service import extend_stay

        mine = make_reservation(room['id'], datetime(2025, 1, 10), datetime(2025, 1, 12))
        make_reservation(room['id'], datetime(2025, 1, 14), datetime(2025, 1, 16))

        result = extend_stay(mine['id'], '2025-01-14', user)

        assert result['data']['check_out_date'] == '2025-01-14T00:00:00'

    @pytest.mark.parametrize('new_checkout', ['2025-01-12', '2025-01-11', '2025-01-12T20:00:00'])
    def test_must_be_a_later_day(self, app, room, user, make_reservation, new_checkout):
        from services.reservation_service import extend_stay
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10, 14), datetime(2025, 1, 12, 12))

        with pytest.raises(ValidationError, match='posterior'):
            extend_stay(mine['id'], new_checkout, user)

    @pytest.mark.parametrize('status', ['PENDING', 'CHECKED_OUT', 'CANCELED'])
    def test_status_restricted(self, app, room, user, make_reservation, status):
        from services.reservation_service import extend_stay
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10), datetime(2025, 1, 12), status=status)

        with pytest.raises(ValidationError, match=status):
            extend_stay(mine['id'], '2025-01-14', user)

    def test_malformed_date(self, app, room, user, make_reservation):
        from services.reservation_service import extend_stay
        from utils.errors import ValidationError

        mine = make_reservation(room['id'], datetime(2025, 1, 10), datetime(2025, 1, 12))

        with pytest.raises(ValidationError):
            extend_stay(mine['id'], 'mañana', user)
