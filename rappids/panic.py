"""Reasons for which the vehicle may enter its panic state."""

from __future__ import annotations

from enum import IntEnum

_UNKNOWN = "UNKNOWN_PANIC!"


class PanicReason(IntEnum):
    """Why the vehicle stopped its motors."""

    NO_PANIC = 0
    ONBOARD_ESTIMATE_CRAZY = 1
    UWB_TIMEOUT = 2
    UPSIDE_DOWN = 3
    RADIO_CMD_TIMEOUT = 4
    LOW_BATTERY = 5
    KILLED_INTERNALLY = 6
    KILLED_EXTERNALLY = 7


def panic_reason_string(reason: int) -> str:
    """Readable name of a panic reason; unknown codes give ``UNKNOWN_PANIC!``."""
    try:
        return PanicReason(int(reason)).name
    except ValueError:
        return _UNKNOWN