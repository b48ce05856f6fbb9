"""
Centralized Spanish user-facing messages.
All text returned to callers of the reservation core goes through here.
"""

MESSAGES = {
    # Success messages
    'reservation_created': 'Reservación creada exitosamente',
    'reservation_updated': 'Reservación actualizada exitosamente',
    'reservation_unchanged': 'La reservación no presenta cambios',
    'status_changed': 'Estado de reservación cambiado a {status} exitosamente',
    'late_checkout_applied': 'Late checkout aplicado correctamente. Nueva hora de salida: {time}',
    'late_checkout_removed': 'Late Checkout eliminado correctamente. Se ha restaurado la hora original de salida.',
    'stay_extended': 'Estadía extendida correctamente hasta el {date}',
    'deactivation_summary': 'Desactivación de reservaciones completada. {ok} exitosas, {failed} fallidas.',
    'reactivation_summary': 'Reactivación de reservaciones completada. {ok} exitosas, {failed} fallidas.',
    'room_available': 'Habitación disponible',
    'room_unavailable': 'Habitación no disponible para las fechas seleccionadas',

    # Not found
    'reservation_not_found': 'Reservación con ID {id} no encontrada',
    'room_not_found': 'Habitación con ID {id} no encontrada',

    # Validation
    'field_required': 'El campo {field} es requerido',
    'invalid_date': 'La fecha de {field} no es válida',
    'invalid_date_range': 'La fecha de check-in debe ser anterior a la fecha de check-out',
    'invalid_status': 'Estado de reservación inválido: {status}',
    'invalid_initial_status': 'Una reservación no puede crearse con estado {status}',
    'invalid_time_format': 'El formato de la nueva hora de checkout debe ser HH:mm',
    'invalid_guests': 'La lista de huéspedes no es válida: {detail}',
    'empty_ids': 'Debe proporcionar al menos un ID de reservación',
    'not_editable': 'Reservación con el ID {id} no puede ser actualizada porque está en estado {status}',
    'integrity_error': 'No se pudo guardar la reservación porque alguno de los registros relacionados no existe o está duplicado',

    # State machine
    'invalid_transition': 'No se puede cambiar una reservación de {current} a {target}',
    'pending_payment': 'No se puede realizar el check-out porque la reservación tiene pagos pendientes',
    'unknown_status': 'Estado de reserva desconocido: {status}',

    # Conflicts
    'room_conflict': 'La habitación está ocupada por otra reserva a partir del {date}',
    'late_checkout_conflict': (
        'No se puede aplicar Late Checkout porque hay otra reserva programada '
        'para la misma habitación el {date} a las {time}'
    ),
    'extend_stay_conflict': (
        'No se puede extender la estadía porque hay otra reserva programada '
        'para la misma habitación a partir del {date}'
    ),

    # Late checkout / extend stay
    'late_checkout_invalid_status': 'No se puede aplicar Late Checkout a una reserva con estado {status}',
    'late_checkout_already_applied': 'Ya se ha aplicado un Late Checkout a esta reserva. No se puede aplicar múltiples veces.',
    'late_checkout_not_later': 'La nueva hora de checkout debe ser posterior a la hora original',
    'late_checkout_not_applied': 'Esta reserva no tiene Late Checkout aplicado.',
    'late_checkout_remove_invalid_status': 'No se puede eliminar el Late Checkout de una reserva con estado {status}',
    'extend_stay_invalid_status': 'No se puede extender la estadía de una reserva con estado {status}',
    'extend_stay_not_after_checkout': 'La nueva fecha de checkout debe ser posterior a la fecha original',
    'extend_stay_not_after_checkin': 'La nueva fecha de checkout debe ser posterior a la fecha de check-in',

    # Batch
    'cannot_deactivate': 'No puede desactivar esta reservación por su estado actual',
    'cannot_reactivate': 'No puede reactivar esta reservación por su estado actual',
    'already_active': 'La reservación ya se encuentra activa',
    'checkin_in_past': 'No se puede reactivar la reservación porque la fecha de check-in ya pasó',
    'interval_taken': (
        'No se puede reactivar la reservación porque no hay fechas disponibles '
        'para el check-in y check-out que tenía originalmente'
    ),
    'item_internal_error': 'Error interno al procesar la reservación',

    # Unexpected
    'unexpected_error': 'Ocurrió un error al {action}. Por favor, intente nuevamente.',

    # Reservation states
    'state_pending': 'Pendiente',
    'state_confirmed': 'Confirmada',
    'state_checked_in': 'Check-in',
    'state_checked_out': 'Check-out',
    'state_canceled': 'Cancelada',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
