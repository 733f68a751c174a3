"""Reveal proof check.

A proof blob is a fixed-offset, big-endian payload:

    offset 0   4 bytes   input count (must be 2)
    offset 4   32 bytes  commitment value
    offset 64  4 bytes   revealed number

The check only confirms the blob repeats the stored commitment and the
claimed number. It does not bind the number to the commitment
cryptographically.
"""

from __future__ import annotations

MIN_PROOF_LENGTH = 132
EXPECTED_INPUT_COUNT = 2

_INPUT_COUNT_OFFSET = 0
_COMMITMENT_OFFSET = 4
_NUMBER_OFFSET = 64


def _byte_at(blob: bytes, index: int) -> int:
    """Byte at *index*, or 0 past the end of the blob."""
    if index < len(blob):
        return blob[index]
    return 0


def _read_u32(blob: bytes, offset: int) -> int:
    value = 0
    for i in range(4):
        value = (value << 8) | _byte_at(blob, offset + i)
    return value


def verify_proof(stored_commitment: bytes, number: int, proof: bytes) -> bool:
    """Return True if *proof* carries *stored_commitment* and *number*. Never raises."""
    if len(proof) < MIN_PROOF_LENGTH:
        return False
    if _read_u32(proof, _INPUT_COUNT_OFFSET) != EXPECTED_INPUT_COUNT:
        return False
    claimed_commitment = bytes(_byte_at(proof, _COMMITMENT_OFFSET + i) for i in range(32))
    if claimed_commitment != stored_commitment:
        return False
    return _read_u32(proof, _NUMBER_OFFSET) == number


def build_proof_blob(commitment: bytes, number: int, *, length: int = MIN_PROOF_LENGTH) -> bytes:
    """Assemble a blob that :func:`verify_proof` accepts for (*commitment*, *number*).

    Client-side helper; bytes outside the three fields are zero.
    """
    if len(commitment) != 32:
        raise ValueError("commitment must be exactly 32 bytes")
    if not 0 <= number <= 0xFFFFFFFF:
        raise ValueError("number must fit in an unsigned 32-bit integer")
    if length < MIN_PROOF_LENGTH:
        raise ValueError(f"proof blob must be at least {MIN_PROOF_LENGTH} bytes")
    blob = bytearray(length)
    blob[_INPUT_COUNT_OFFSET : _INPUT_COUNT_OFFSET + 4] = EXPECTED_INPUT_COUNT.to_bytes(4, "big")
    blob[_COMMITMENT_OFFSET : _COMMITMENT_OFFSET + 32] = commitment
    blob[_NUMBER_OFFSET : _NUMBER_OFFSET + 4] = number.to_bytes(4, "big")
    return bytes(blob)
