import bcrypt

from src.app.services.password_hasher import MAX_SECRET_BYTES, IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt implementation of IPasswordHasher"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        secret = plaintext.encode()
        if len(secret) > MAX_SECRET_BYTES:
            raise ValueError(f"Secret longer than {MAX_SECRET_BYTES} bytes")
        return bcrypt.hashpw(secret, bcrypt.gensalt(self.rounds)).decode()

    def verify(self, plaintext: str, digest: str) -> bool:
        if not digest:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode(), digest.encode())
        except ValueError:
            # Malformed stored hash or over-long input
            return False
