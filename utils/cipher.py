"""
Deterministic AES-256-CBC encryption of access codes.

The key and IV are fixed for the life of the process, so the same plaintext
always produces the same ciphertext. The ciphertext is used as a lookup key
in the access_codes table; nothing is ever decrypted.
"""
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from utils.errors import ConfigurationError
from utils.settings import IV_LENGTH, KEY_LENGTH, Settings


class CodeCipher:
    def __init__(self, key: bytes, iv: bytes):
        if len(key) != KEY_LENGTH:
            raise ConfigurationError(f"Encryption key must be {KEY_LENGTH} bytes, got {len(key)}")
        if len(iv) != IV_LENGTH:
            raise ConfigurationError(f"Encryption IV must be {IV_LENGTH} bytes, got {len(iv)}")
        self._key = bytes(key)
        self._iv = bytes(iv)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CodeCipher":
        return cls(settings.encryption_key, settings.encryption_iv)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a UTF-8 string and return lowercase hex ciphertext"""
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(self._iv)).encryptor()
        return (encryptor.update(padded) + encryptor.finalize()).hex()
