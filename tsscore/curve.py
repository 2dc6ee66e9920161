"""Elliptic curve descriptions and the registry of curves known to TSS."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class CurveName(str, enum.Enum):
    """Names of the curves registered by default."""

    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Curve:
    """Domain parameters of an elliptic curve."""

    name: str
    p: int
    n: int
    gx: int
    gy: int
    bit_size: int

    def order_bits(self) -> int:
        """Bit length of the group order."""
        return self.n.bit_length()


_SECP256K1 = Curve(
    name="secp256k1",
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    gx=0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    gy=0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
    bit_size=256,
)

_EDWARDS25519 = Curve(
    name="ed25519",
    p=2**255 - 19,
    n=2**252 + 27742317777372353535851937790883648493,
    gx=15112221349535400772501151409588531511454012693041857206046113283949847762202,
    gy=46316835694926478169428394003475163141307993866256225615783033603165251855960,
    bit_size=256,
)

_registry: dict[str, Curve] = {
    CurveName.SECP256K1: _SECP256K1,
    CurveName.ED25519: _EDWARDS25519,
}

_current: Curve = _SECP256K1


def register_curve(name: Union[CurveName, str], curve: Curve) -> None:
    """Register ``curve`` under ``name``, replacing any previous entry."""
    _registry[name] = curve


def get_curve_by_name(name: Union[CurveName, str]) -> Optional[Curve]:
    """Return the curve registered under ``name``, or None."""
    return _registry.get(name)


def get_curve_name(curve: Optional[Curve]) -> Optional[Union[CurveName, str]]:
    """Return the registered name of ``curve``, or None if it is unknown."""
    if curve is None:
        return None
    for name, known in _registry.items():
        if known == curve:
            return name
    return None


def same_curve(lhs: Optional[Curve], rhs: Optional[Curve]) -> bool:
    """True if both curves are known and registered under the same name."""
    lhs_name = get_curve_name(lhs)
    rhs_name = get_curve_name(rhs)
    if lhs_name is None or rhs_name is None:
        return False
    return str(lhs_name) == str(rhs_name)


def ec() -> Curve:
    """The curve currently in use; secp256k1 by default."""
    return _current


def set_curve(curve: Optional[Curve]) -> None:
    """Set the curve used by TSS. Deprecated: pass curves via parameters."""
    global _current
    if curve is None:
        raise ValueError("set_curve received a nil curve")
    _current = curve


def s256() -> Curve:
    """The secp256k1 curve."""
    return _SECP256K1


def edwards() -> Curve:
    """The twisted Edwards curve used by Ed25519."""
    return _EDWARDS25519