import math

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def format_money(cents, currency: str = "EUR") -> str:
    """Format an integer amount in cents, e.g. 1234 -> "€12.34".

    Anything that is not a finite number formats as zero.
    """
    try:
        value = float(cents)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0

    code = (currency or "EUR").upper()
    sign = "-" if value < 0 else ""
    amount = f"{abs(value) / 100:,.2f}"

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{amount}"
    return f"{sign}{amount} {code}"
