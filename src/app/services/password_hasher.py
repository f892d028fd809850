from abc import ABC, abstractmethod

# bcrypt only looks at the first 72 bytes of its input
MAX_SECRET_BYTES = 72


class IPasswordHasher(ABC):
    """One-way hashing for passwords and security answers"""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Hash plaintext, raises ValueError past MAX_SECRET_BYTES"""
        pass

    @abstractmethod
    def verify(self, plaintext: str, digest: str) -> bool:
        pass
