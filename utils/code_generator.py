import secrets
import string

# A-Z a-z 0-9 plus the shifted digit-row symbols
ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "!@#$%^&*()"
ACCESS_CODE_LENGTH = 12


def generate_access_code(length: int = ACCESS_CODE_LENGTH) -> str:
    """
    Generate a random access code from ACCESS_CODE_ALPHABET.

    Each character is picked with one byte from a cryptographically secure
    source, indexed as `byte % len(alphabet)`. 256 is not a multiple of the
    alphabet size, so the first 256 % 72 characters are very slightly more
    likely than the rest.

    Example:
        generate_access_code() -> "aB3$kQ9!zP0m"
    """
    random_bytes = secrets.token_bytes(length)
    return ''.join(ACCESS_CODE_ALPHABET[b % len(ACCESS_CODE_ALPHABET)] for b in random_bytes)
