from decimal import Decimal


def truncate(value: str | None, limit: int = 300) -> str | None:
    if not value:
        return value
    if len(value) <= limit:
        return value
    return f"{value[:limit]}... (truncated {len(value) - limit} chars)"


def format_price(price: int | float | str) -> str:
    """Render a price with thousands separators; strings are already formatted."""
    if isinstance(price, str) or isinstance(price, bool):
        return str(price)
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    if isinstance(price, int):
        return f"{price:,}"
    # Same precision a default-locale number formatter uses: at most 3 decimals
    rounded = Decimal(str(round(price, 3)))
    text = f"{rounded:,f}"
    return text.rstrip("0").rstrip(".") if "." in text else text
