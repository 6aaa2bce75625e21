"""
Invitation Credential Generation

Every invitation carries two independent credentials:
- token: 32 random bytes, URL-safe base64 (43 characters), used in links
- invitation_code: 8 characters a person can read aloud and type

Both come straight from the ``secrets`` module. Nothing about a credential
depends on time, sequence or previously issued credentials; uniqueness is a
property of the keyspace, and the store's unique indexes are the backstop.
"""

import secrets

TOKEN_BYTES = 32
CODE_LENGTH = 8

# No 0/O, 1/I/l/L, and nothing outside the URL-safe set (+ and / are never used)
CODE_ALPHABET = (
    "ABCDEFGHJKMNPQRSTUVWXYZ"
    "abcdefghijkmnopqrstuvwxyz"
    "23456789"
)


class TokenGenerationError(Exception):
    """The operating system could not provide secure randomness"""


class TokenGenerator:
    def __init__(self, token_bytes: int = TOKEN_BYTES, code_length: int = CODE_LENGTH):
        self.token_bytes = token_bytes
        self.code_length = code_length

    def generate_token(self) -> str:
        try:
            return secrets.token_urlsafe(self.token_bytes)
        except (OSError, NotImplementedError) as exc:
            raise TokenGenerationError("Secure random source unavailable") from exc

    def generate_code(self) -> str:
        try:
            return "".join(
                secrets.choice(CODE_ALPHABET) for _ in range(self.code_length)
            )
        except (OSError, NotImplementedError) as exc:
            raise TokenGenerationError("Secure random source unavailable") from exc
