"""ECS component storing the named counter pools of a combat entity."""

from __future__ import annotations

from typing import Iterator, Mapping, MutableMapping

from utils.abilities import counter_cap


class AbilityStateComponent:
    """Track per-ability counters (stacks, rotation pointers, hit counters, ...).

    Each pool is addressed by name (see :mod:`utils.abilities`).  Values are
    clamped to ``[0, cap]`` whenever they are written, so two abilities only
    ever observe each other's progress when they deliberately share a pool.
    """

    def __init__(self, **counters: int) -> None:
        self._values: MutableMapping[str, int] = {}
        if counters:
            self.update(counters)

    @staticmethod
    def _clamp(pool: str, amount: int) -> int:
        cap = counter_cap(pool)
        amount = max(0, int(amount))
        if cap is not None:
            amount = min(amount, cap)
        return amount

    def set(self, pool: str, amount: int) -> None:
        """Assign ``amount`` to ``pool`` (clamped to the pool's bounds)."""

        key = str(pool)
        value = self._clamp(key, amount)
        if value:
            self._values[key] = value
        else:
            self._values.pop(key, None)

    def add(self, pool: str, amount: int) -> None:
        """Increase ``pool`` by ``amount`` (may be negative)."""

        self.set(pool, self.get(pool) + int(amount))

    def get(self, pool: str) -> int:
        """Return the current value of ``pool`` (0 when never written)."""

        return int(self._values.get(str(pool), 0))

    def update(self, mapping: Mapping[str, int]) -> None:
        """Assign several pools at once from ``mapping`` of pool -> amount."""

        for key, value in mapping.items():
            self.set(str(key), int(value))

    def as_dict(self) -> dict[str, int]:
        """Return a plain dictionary copy of the non-zero pools."""

        return {key: int(value) for key, value in self._values.items()}

    def copy(self) -> "AbilityStateComponent":
        return AbilityStateComponent(**self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._values))

    def __contains__(self, pool: str) -> bool:  # pragma: no cover - convenience
        return str(pool) in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbilityStateComponent):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"AbilityStateComponent({self.as_dict()!r})"


__all__ = ["AbilityStateComponent"]
