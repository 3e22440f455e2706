"""GenotypeRegistry — immutable channel/position genotype lookup.

Built once from the constants table and validated on construction.
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from hpvqpcr.constants import (
    HIGH_RISK_GENOTYPES,
    HPV_LOOKUP_TABLE,
    INTERNAL_CONTROL_NAME,
    LOW_RISK_GENOTYPES,
)
from hpvqpcr.errors import RegistryError
from hpvqpcr.models import RiskTier


class GenotypeRegistry:
    __slots__ = ("_table", "_high_risk", "_low_risk", "_internal_control")

    def __init__(
        self,
        table: Mapping[str, Mapping[str, str]],
        high_risk: Iterable[str],
        low_risk: Iterable[str],
        internal_control: str = INTERNAL_CONTROL_NAME,
    ):
        frozen = {
            channel: MappingProxyType(dict(positions))
            for channel, positions in table.items()
        }
        object.__setattr__(self, "_table", MappingProxyType(frozen))
        object.__setattr__(self, "_high_risk", frozenset(high_risk))
        object.__setattr__(self, "_low_risk", frozenset(low_risk))
        object.__setattr__(self, "_internal_control", internal_control)
        self._validate()

    def __setattr__(self, name, value):
        raise AttributeError("GenotypeRegistry is immutable")

    @classmethod
    @lru_cache(maxsize=None)
    def default(cls) -> "GenotypeRegistry":
        """Process-wide registry built from the built-in lookup table."""
        return cls(HPV_LOOKUP_TABLE, HIGH_RISK_GENOTYPES, LOW_RISK_GENOTYPES)

    def _validate(self):
        overlap = self._high_risk & self._low_risk
        if overlap:
            raise RegistryError(
                f"Genotypes listed as both high and low risk: {', '.join(sorted(overlap))}"
            )
        for channel, positions in self._table.items():
            for position, code in positions.items():
                if code == self._internal_control:
                    continue
                if code not in self._high_risk and code not in self._low_risk:
                    raise RegistryError(
                        f"Genotype {code} at {channel}/{position} has no risk tier"
                    )

    @property
    def channels(self) -> tuple:
        return tuple(self._table)

    @property
    def table(self) -> Mapping[str, Mapping[str, str]]:
        return self._table

    @property
    def high_risk_genotypes(self) -> frozenset:
        return self._high_risk

    @property
    def low_risk_genotypes(self) -> frozenset:
        return self._low_risk

    @property
    def internal_control_marker(self) -> str:
        return self._internal_control

    def genotype_for(self, channel: str, position: Optional[str]) -> Optional[str]:
        """Look up the genotype at ``channel``/``position``; None when absent."""
        if position is None:
            return None
        return self._table.get(channel, {}).get(position)

    def risk_tier(self, code: str) -> Optional[RiskTier]:
        if code in self._high_risk:
            return RiskTier.HIGH
        if code in self._low_risk:
            return RiskTier.LOW
        return None

    def is_internal_control(self, code: str) -> bool:
        return code == self._internal_control
