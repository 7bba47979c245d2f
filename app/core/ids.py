# app/core/ids.py
import secrets
import string
import time

_BASE36 = string.digits + string.ascii_lowercase


def new_cart_item_id(prefix: str) -> str:
    """
    Generate a synthetic cart line id: ``<prefix>_<epoch ms>_<9 base36 chars>``.

    Used for server rows ("custom", "item") and client-only lines
    ("custom", "temp").
    """
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{millis}_{suffix}"
