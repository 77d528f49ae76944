"""Password hashing with passlib."""

from passlib.context import CryptContext

from hostpanel.application.interfaces.password_hasher import PasswordHasher

# pbkdf2_sha256 is implemented in pure Python by passlib.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasslibPasswordHasher(PasswordHasher):

    def hash(self, password: str) -> str:
        return _pwd_context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return _pwd_context.verify(password, password_hash)
