import math


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round halves toward positive infinity (2.5 -> 3, -2.5 -> -2).

    Unlike round(), which rounds halves to even (22.5 -> 22).
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))
