"""Delivery of parsed snapshots to registered callbacks."""
import logging

from .models import CallbackSet, FieldKind, WeatherSnapshot

logger = logging.getLogger(__name__)

def dispatch(snapshot: WeatherSnapshot, callbacks: CallbackSet) -> int:
    """Call every registered handler whose field is present.

    Handlers run synchronously in FieldKind order and receive the
    field's values followed by ``callbacks.user_data``. Exceptions
    raised by a handler propagate. Returns the number of handlers run.
    """
    user_data = callbacks.user_data
    invoked = 0

    for kind in snapshot.present_fields():
        handler = callbacks.handler_for(kind)
        if handler is None:
            continue

        if kind is FieldKind.TEMPERATURE:
            handler(snapshot.temperature.celsius, snapshot.temperature.fahrenheit, user_data)
        elif kind is FieldKind.CONDITION:
            handler(snapshot.condition, user_data)
        elif kind is FieldKind.WIND:
            handler(snapshot.wind.speed_kph, snapshot.wind.direction_deg, user_data)
        elif kind is FieldKind.PRESSURE:
            handler(snapshot.pressure_hpa, user_data)
        elif kind is FieldKind.HUMIDITY:
            handler(snapshot.humidity_percent, user_data)
        invoked += 1

    logger.debug(f"Dispatched {invoked} callbacks")
    return invoked
