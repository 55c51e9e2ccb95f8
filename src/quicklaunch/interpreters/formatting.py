import math

DECIMALS = 3


def format_number(value: float) -> str:
    """Render a numeric result for display.

    Integral values print without a decimal point, everything else is rounded
    to three decimals with trailing zeros stripped.
    """
    if value == 0:
        return "0"
    if abs(value) >= 1e15:
        return f"{value:.6g}"
    if float(value).is_integer():
        return str(int(value))
    rounded = round(value, DECIMALS)
    if rounded == 0:
        return f"{value:.3g}"
    text = f"{rounded:.{DECIMALS}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def is_finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))
