from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero; round() would round 2.5 to 2."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def rounded_mean(values, digits: int = 1) -> float:
    """Mean rounded half-up; 0 for no values."""
    values = list(values)
    if not values:
        return 0
    return round_half_up(sum(values) / len(values), digits)
