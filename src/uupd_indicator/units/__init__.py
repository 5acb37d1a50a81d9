from .connection import ConnectionState, UnitConnection, service_connection, timer_connection
from .properties import decode_value, read_property

__all__ = [
    "ConnectionState",
    "UnitConnection",
    "decode_value",
    "read_property",
    "service_connection",
    "timer_connection",
]
