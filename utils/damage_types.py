from enum import Enum


class WeaponType(str, Enum):
    KINETIC = "kinetic"
    ENERGY = "energy"
    THERMAL = "thermal"


class WeaponTier(str, Enum):
    STANDARD = "standard"
    LEGENDARY = "legendary"


class FireClass(str, Enum):
    NONE = "none"
    FULL = "full"        # fully fire-based (incinerator style)
    PARTIAL = "partial"  # mixed kinetic/fire (dragon's breath style)


# Level scaling per weapon tier.
LEVEL_RATES = {
    WeaponTier.STANDARD: 0.10,
    WeaponTier.LEGENDARY: 0.05,
}


def level_rate(tier: WeaponTier) -> float:
    return LEVEL_RATES[WeaponTier(tier)]


__all__ = [
    'WeaponType', 'WeaponTier', 'FireClass', 'LEVEL_RATES', 'level_rate'
]
