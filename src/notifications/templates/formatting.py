"""Display helpers shared by templates."""


def format_amount(amount) -> str:
    try:
        return f"{float(amount):,.2f} EUR"
    except (TypeError, ValueError):
        return "0.00 EUR"
