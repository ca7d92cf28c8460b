"""Standard PDF security handler (RC4, 40-bit)."""

from __future__ import annotations

import enum
import hashlib
import secrets

_PADDING = bytes(
    [
        0x28, 0xBF, 0x4E, 0x5E, 0x4E, 0x75, 0x8A, 0x41,
        0x64, 0x00, 0x4E, 0x56, 0xFF, 0xFA, 0x01, 0x08,
        0x2E, 0x2E, 0x00, 0xB6, 0xD0, 0x68, 0x3E, 0x80,
        0x2F, 0x0C, 0xA9, 0xFE, 0x64, 0x53, 0x69, 0x7A,
    ]
)

_RANDOM_CHARS = "abcdef0123456789"


class Permission(enum.IntFlag):
    """Permissions that can be granted to the user of a protected document."""

    PRINT = 4
    MODIFY = 8
    COPY = 16
    ANNOT_FORMS = 32


def rc4(key: bytes, data: bytes) -> bytes:
    """Encrypt or decrypt ``data`` with RC4 under ``key``."""
    if not 1 <= len(key) <= 256:
        raise ValueError(f"invalid rc4 key size {len(key)}")
    state = list(range(256))
    j = 0
    for i in range(256):
        j = (j + state[i] + key[i % len(key)]) & 0xFF
        state[i], state[j] = state[j], state[i]
    out = bytearray()
    i = j = 0
    for byte in data:
        i = (i + 1) & 0xFF
        j = (j + state[i]) & 0xFF
        state[i], state[j] = state[j], state[i]
        out.append(byte ^ state[(state[i] + state[j]) & 0xFF])
    return bytes(out)


def _pad(value: bytes) -> bytes:
    return (bytes(value) + _PADDING)[:32]


class PDFProtection:
    """Holds the O, U and P entries and the document encryption key."""

    def __init__(self) -> None:
        self.o_value = b""
        self.u_value = b""
        self.p_value = 0
        self.encryption_key = b""

    def set_protection(self, permissions: int, user_pass: bytes, owner_pass: bytes | None) -> None:
        """Compute the encryption entries for the given permissions and passwords."""
        protection = 192 | int(permissions)
        if not owner_pass:
            owner_pass = "".join(secrets.choice(_RANDOM_CHARS) for _ in range(24)).encode()
        user_padded = _pad(user_pass or b"")
        owner_padded = _pad(owner_pass)

        owner_key = hashlib.md5(owner_padded).digest()[:5]
        self.o_value = rc4(owner_key, user_padded)

        digest = hashlib.md5(
            user_padded + self.o_value + bytes([protection & 0xFF, 0xFF, 0xFF, 0xFF])
        ).digest()
        self.encryption_key = digest[:5]
        self.u_value = rc4(self.encryption_key, _PADDING)
        self.p_value = -((protection ^ 255) + 1)

    def object_key(self, obj_id: int) -> bytes:
        """Return the RC4 key for the object with number ``obj_id``."""
        n = (obj_id & 0xFFFFFFFF).to_bytes(4, "little")
        return hashlib.md5(self.encryption_key + n[:3] + b"\x00\x00").digest()[:10]