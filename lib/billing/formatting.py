"""fr-FR money formatting."""

from lib.numbers import round_half_away

# fr-FR groups thousands with a narrow no-break space.
GROUP_SEPARATOR = "\u202f"


def format_euro(amount: float) -> str:
    """Whole euros, fr-FR grouping: 1234.0 -> "1 234 €", -1234.5 -> "-1 235 €"."""
    value = round_half_away(amount)
    digits = f"{abs(value):,}".replace(",", GROUP_SEPARATOR)
    sign = "-" if value < 0 else ""
    return f"{sign}{digits} €"
