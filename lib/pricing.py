# =============================================================================
# lib/pricing.py - Coin Pricing
# =============================================================================
# Maps (file type, file size) to the number of coins a download costs.
#
# The thresholds are part of the coin economy: leaderboard fixtures and
# existing resource prices depend on them, so they must not drift.
# =============================================================================

BYTES_PER_MIB = 1024 * 1024
MIN_COIN_PRICE = 2
DEFAULT_BASE_PRICE = 3

BASE_PRICES: dict[str, int] = {
    "PDF": 5,
    "DOC": 4,
    "DOCX": 4,
    "IMAGE": 3,
    "JPG": 3,
    "PNG": 3,
}

# (size in MiB strictly above, surcharge), checked in order
SIZE_SURCHARGES: tuple[tuple[int, int], ...] = (
    (10, 2),
    (5, 1),
)


def calculate_coin_price(file_type: str, file_size: int | None = None) -> int:
    """
    Coin price for a resource.

    Args:
        file_type: Type tag such as "PDF", "DOCX" or "Image" (case-insensitive)
        file_size: Size in bytes; None or 0 means unknown

    Returns:
        Price in coins, never below MIN_COIN_PRICE

    Example:
        calculate_coin_price("PDF", 11_000_000)  # 7
        calculate_coin_price("Image", 1_000)     # 3
        calculate_coin_price("DOC", 6_000_000)   # 5
    """
    price = BASE_PRICES.get((file_type or "").upper(), DEFAULT_BASE_PRICE)

    if file_size:
        size_mib = file_size / BYTES_PER_MIB
        for threshold, surcharge in SIZE_SURCHARGES:
            if size_mib > threshold:
                price += surcharge
                break

    return max(price, MIN_COIN_PRICE)
