import os

DEFAULT_ADDON_ROOTS_TTL = 600.0


def get_addon_roots_ttl() -> float:
    """Seconds an addon-roots lookup stays cached (``EMBER_NAV_ADDON_ROOTS_TTL``)."""
    raw = os.getenv("EMBER_NAV_ADDON_ROOTS_TTL")
    if not raw:
        return DEFAULT_ADDON_ROOTS_TTL
    try:
        ttl = float(raw)
    except ValueError:
        raise ValueError(f"EMBER_NAV_ADDON_ROOTS_TTL must be a number of seconds, got {raw!r}") from None
    if ttl <= 0:
        raise ValueError(f"EMBER_NAV_ADDON_ROOTS_TTL must be positive, got {raw!r}")
    return ttl


def get_log_level() -> str:
    return os.getenv("EMBER_NAV_LOG_LEVEL", "WARNING").upper()
