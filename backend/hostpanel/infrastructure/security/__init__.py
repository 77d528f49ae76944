from .password_hasher import PasslibPasswordHasher

__all__ = ["PasslibPasswordHasher"]
