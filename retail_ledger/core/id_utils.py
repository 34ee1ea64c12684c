import shortuuid

_DOCUMENT_ALPHABET = "23456789ABCDEFGHJKLMNPQRSTUVWXYZ"


def generate_shortuuid() -> str:
    return shortuuid.uuid()


def generate_document_number(prefix: str, length: int = 8) -> str:
    """Fallback voucher number for rows submitted without one, e.g. ``OUT-7KQ2M9XA``."""
    token = shortuuid.ShortUUID(alphabet=_DOCUMENT_ALPHABET).random(length=length)
    return f"{prefix.strip().upper()}-{token}"
