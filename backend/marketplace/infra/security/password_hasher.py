# marketplace/infra/security/password_hasher.py
from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from marketplace.services._shared.ports import PasswordHasher

DEFAULT_METHOD = "scrypt:32768:8:1"


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Salted one-way hashing backed by :mod:`werkzeug.security`.

    :param method: Werkzeug method string carrying the work factor, e.g.
        ``"scrypt:32768:8:1"`` or ``"pbkdf2:sha256:600000"``.
    :param salt_length: Random salt length in characters.
    """

    method: str = DEFAULT_METHOD
    salt_length: int = 16

    def hash(self, plain: str) -> str:
        if not isinstance(plain, str) or not plain:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plain, method=self.method, salt_length=self.salt_length)

    def check(self, plain: str, digest: str) -> bool:
        if not digest or not isinstance(plain, str):
            return False
        try:
            # ``check_password_hash`` is not typed and returns ``Any``; coerce to bool for mypy.
            return bool(check_password_hash(digest, plain))
        except ValueError:
            # Unknown or malformed method segment in the stored digest.
            return False
