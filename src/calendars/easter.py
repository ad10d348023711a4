"""
Easter Sunday provider.

The computus itself comes from python-dateutil; this module pins the
Western (Gregorian) method and rejects years outside the range the
Gregorian algorithm is defined for.
"""

from datetime import date

from dateutil.easter import EASTER_WESTERN, easter

# dateutil documents the Western method as valid for these years
MIN_EASTER_YEAR = 1583
MAX_EASTER_YEAR = 4099


def easter_sunday(year: int) -> date:
    """
    Western (Gregorian) Easter Sunday for the given year.

    Raises:
        ValueError: If year is outside 1583..4099
    """
    if not MIN_EASTER_YEAR <= year <= MAX_EASTER_YEAR:
        raise ValueError(
            f"Easter date undefined for year {year} "
            f"(supported: {MIN_EASTER_YEAR}..{MAX_EASTER_YEAR})"
        )
    return easter(year, EASTER_WESTERN)
