from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from .edit import as_codes


def hamming(lhs: Sequence[Any] | np.ndarray, rhs: Sequence[Any] | np.ndarray) -> int:
    """Number of positions at which two equal-length sequences differ."""

    lhs_arr = as_codes(lhs)
    rhs_arr = as_codes(rhs)
    if lhs_arr.shape != rhs_arr.shape:
        raise ValueError(
            f"Hamming distance requires equal shapes, got {lhs_arr.shape} and {rhs_arr.shape}."
        )
    return int(np.count_nonzero(lhs_arr != rhs_arr))


def padded_hamming(lhs: Sequence[Any] | np.ndarray, rhs: Sequence[Any] | np.ndarray) -> int:
    """Positional mismatch count where every position past the shorter input differs.

    Equivalent to Hamming distance after padding both inputs with a sentinel
    that matches nothing, so it stays a metric for inputs of any length.
    """

    lhs_arr = as_codes(lhs)
    rhs_arr = as_codes(rhs)
    common = min(lhs_arr.shape[0], rhs_arr.shape[0])
    tail = abs(lhs_arr.shape[0] - rhs_arr.shape[0])
    return int(np.count_nonzero(lhs_arr[:common] != rhs_arr[:common])) + tail


def bit_hamming(lhs: int, rhs: int) -> int:
    """Number of differing bits between two non-negative integer hashes."""

    return (int(lhs) ^ int(rhs)).bit_count()


@dataclass(frozen=True)
class HashCode:
    """Fixed-width perceptual/similarity hash compared bit by bit."""

    value: int
    bits: int = 64

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("HashCode value must be non-negative.")
        if self.value.bit_length() > self.bits:
            raise ValueError(f"HashCode value does not fit in {self.bits} bits.")

    @classmethod
    def from_bits(cls, bits: Sequence[bool] | np.ndarray) -> "HashCode":
        """Pack a boolean vector (most significant bit first) into a hash."""

        arr = np.asarray(bits, dtype=bool).ravel()
        value = 0
        for bit in np.packbits(arr, bitorder="big").tolist():
            value = (value << 8) | int(bit)
        padding = (-arr.shape[0]) % 8
        return cls(value >> padding, bits=int(arr.shape[0]))

    @classmethod
    def from_hex(cls, text: str) -> "HashCode":
        text = text.strip().lower().removeprefix("0x")
        return cls(int(text, 16), bits=4 * len(text))

    def distance_to(self, other: "HashCode") -> int:
        return bit_hamming(self.value, other.value)

    def hex(self) -> str:
        return format(self.value, f"0{max(1, (self.bits + 3) // 4)}x")


__all__ = ["HashCode", "bit_hamming", "hamming", "padded_hamming"]
