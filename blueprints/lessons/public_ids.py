# blueprints/lessons/public_ids.py
from __future__ import annotations
import secrets

# только верхний регистр и цифры, чтобы id можно было продиктовать
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
MIN_LENGTH = 8
MAX_LENGTH = 10

def _random_part(length: int) -> str:
    raw = secrets.token_bytes(length)
    return "".join(ALPHABET[b % len(ALPHABET)] for b in raw)

def generate_public_id(prefix: str) -> str:
    """Внешний id вида ``LSN-7K2Q9XAB``.

    Уникальность здесь не проверяется: 36**8 вариантов хватает, а
    окончательно решает уникальный индекс в БД.
    """
    length = MIN_LENGTH + secrets.randbelow(MAX_LENGTH - MIN_LENGTH + 1)
    return f"{prefix}-{_random_part(length)}"
