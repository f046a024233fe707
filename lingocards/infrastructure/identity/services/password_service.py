"""Password hashing and verification."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

from lingocards.config import Settings


class PasswordService:
    """Argon2 hashing (pwdlib recommended settings) with an optional server-side pepper."""

    def __init__(self, settings: Settings) -> None:
        self.pepper = settings.PASSWORD_PEPPER
        self.password_hash = PasswordHash.recommended()
        # A real hash, so that logins for unknown emails cost the same as real ones
        self.dummy_hash = self.password_hash.hash("dummy_password_for_timing_attack_prevention")

    def hash_password(self, plain_password: str) -> str:
        return self.password_hash.hash(plain_password + self.pepper)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self.password_hash.verify(plain_password + self.pepper, hashed_password)
        except UnknownHashError:
            return False

    def get_dummy_hash(self) -> str:
        return self.dummy_hash
