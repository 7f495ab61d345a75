"""Hardware identifiers and the strategies that compute and check them."""

from __future__ import annotations

import abc
import enum
from typing import Iterable, Union

from .codec import decode, encode
from .events import EventType

IDENTIFIER_DATA_SIZE = 7
_RAW_SIZE = IDENTIFIER_DATA_SIZE + 1
_ENV_VAR_BIT = 0x40
_DATA_MASK = 0x1F

BytesLike = Union[bytes, bytearray, Iterable[int]]


class HwStrategy(enum.IntEnum):
    """Ways of deriving a hardware identifier."""

    NONE = -2
    DEFAULT = -1
    ETHERNET = 0
    IP_ADDRESS = 1
    DISK = 2


class IdentifierUnavailable(LookupError):
    """No identifier can be computed on this machine with a given strategy."""


class HwIdentifier:
    """An eight byte hardware identifier.

    Byte 0 holds flags (bit 6: an environment variable chose the strategy).
    The top three bits of byte 1 hold the strategy; the remaining five bits
    of byte 1 and bytes 2 to 7 hold the strategy's own data.
    """

    __slots__ = ("_raw",)

    def __init__(
        self,
        strategy: HwStrategy | int | None = None,
        data: BytesLike | None = None,
        use_environment_var: bool = False,
    ) -> None:
        self._raw = bytearray(_RAW_SIZE)
        if strategy is not None:
            self.strategy = strategy
        if data is not None:
            self.data = data
        self.use_environment_var = use_environment_var

    @classmethod
    def from_string(cls, text: str) -> "HwIdentifier":
        """Parse the dash separated form produced by ``str()``."""
        decoded = decode(text.replace("-", "\n"))
        if len(decoded) != _RAW_SIZE:
            raise ValueError(f"wrong identifier size {text}")
        identifier = cls()
        identifier._raw[:] = decoded
        return identifier

    @property
    def strategy(self) -> HwStrategy:
        """The strategy encoded in the identifier; ValueError if unknown."""
        return HwStrategy(self._raw[1] >> 5)

    @strategy.setter
    def strategy(self, value: HwStrategy | int) -> None:
        strategy = HwStrategy(value)
        if strategy in (HwStrategy.NONE, HwStrategy.DEFAULT):
            raise ValueError("Only known strategies are permitted")
        self._raw[1] = (self._raw[1] & _DATA_MASK) | ((int(strategy) << 5) & 0xFF)

    @property
    def use_environment_var(self) -> bool:
        return bool(self._raw[0] & _ENV_VAR_BIT)

    @use_environment_var.setter
    def use_environment_var(self, value: bool) -> None:
        if value:
            self._raw[0] |= _ENV_VAR_BIT
        else:
            self._raw[0] &= ~_ENV_VAR_BIT & 0xFF

    @property
    def data(self) -> bytes:
        """The seven bytes of strategy data (first byte limited to five bits)."""
        return bytes((self._raw[1] & _DATA_MASK,)) + bytes(self._raw[2:])

    @data.setter
    def data(self, value: BytesLike) -> None:
        data = _checked_data(value)
        self._raw[1] = (self._raw[1] & ~_DATA_MASK & 0xFF) | (data[0] & _DATA_MASK)
        self._raw[2:] = data[1:]

    def data_match(self, data: BytesLike) -> bool:
        """Whether ``data`` is the strategy data held by this identifier."""
        candidate = _checked_data(data)
        return (candidate[0] & _DATA_MASK) == (self._raw[1] & _DATA_MASK) and candidate[
            1:
        ] == bytes(self._raw[2:])

    def __bytes__(self) -> bytes:
        return bytes(self._raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HwIdentifier):
            return NotImplemented
        return self._raw[1:] == other._raw[1:]

    def __hash__(self) -> int:
        return hash(bytes(self._raw[1:]))

    def __str__(self) -> str:
        return encode(bytes(self._raw), 5).replace("\n", "-")[:-1]

    def __repr__(self) -> str:
        return f"HwIdentifier.from_string({str(self)!r})"


def _checked_data(value: BytesLike) -> bytes:
    data = bytes(value)
    if len(data) != IDENTIFIER_DATA_SIZE:
        raise ValueError(f"identifier data must be {IDENTIFIER_DATA_SIZE} bytes, got {len(data)}")
    return data


class IdentificationStrategy(abc.ABC):
    """A way of computing the hardware identifiers of the current machine."""

    @property
    @abc.abstractmethod
    def identification_strategy(self) -> HwStrategy:
        """The strategy this object implements."""

    @abc.abstractmethod
    def alternative_ids(self) -> list[HwIdentifier]:
        """Every identifier this machine can be recognised by."""

    def generate_pc_id(self) -> HwIdentifier:
        """The preferred identifier of this machine."""
        available = self.alternative_ids()
        if not available:
            raise IdentifierUnavailable(
                f"strategy {self.identification_strategy.name} found no identifier"
            )
        return available[0]

    def validate_identifier(self, identifier: HwIdentifier) -> EventType:
        """LICENSE_OK if ``identifier`` belongs to this machine, else IDENTIFIERS_MISMATCH."""
        try:
            strategy = identifier.strategy
        except ValueError:
            return EventType.IDENTIFIERS_MISMATCH
        if strategy != self.identification_strategy:
            return EventType.IDENTIFIERS_MISMATCH
        if identifier in self.alternative_ids():
            return EventType.LICENSE_OK
        return EventType.IDENTIFIERS_MISMATCH