"""
Configuration grammar for noise generators.

This module defines:
- Configuration fragments: typed parameter records a generator accepts
- ParameterLimits: clamping of numeric fragment values
- SETTING_KEYS: the fixed IR setting key -> fragment lookup table
- ModuleRegistry: registration and lookup of generator kinds
"""

import hashlib
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, field_validator

from ..errors import ConfigError


class RangeFunction(str, Enum):
    """Distance functions available to cellular noise."""

    EUCLIDEAN = "euclidean"
    EUCLIDEAN_SQUARED = "euclideanSquared"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"
    QUADRATIC = "quadratic"


class ConfFragment(BaseModel):
    """Base class of every configuration fragment."""

    model_config = ConfigDict(extra="forbid")

    fragment: ClassVar[str] = ""


class MultiFractalConf(ConfFragment):
    fragment: ClassVar[str] = "MultiFractal"

    octaves: int = 6
    frequency: float = 1.0
    lacunarity: float = 2.0
    persistence: float = 0.5


class SeedableConf(ConfFragment):
    fragment: ClassVar[str] = "Seedable"

    seed: str = "0"

    @field_validator("seed", mode="before")
    @classmethod
    def _int_seed_to_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def numeric_seed(self) -> int:
        """Hash the seed string to a 32-bit integer."""
        return int(hashlib.md5(self.seed.encode()).hexdigest()[:8], 16)


class WorleyConf(ConfFragment):
    fragment: ClassVar[str] = "Worley"

    range_function: RangeFunction = RangeFunction.EUCLIDEAN
    range_function_enabled: bool = False
    worley_frequency: float = 1.0
    displacement: float = 1.0

    @field_validator("range_function", mode="before")
    @classmethod
    def _accept_variant_names(cls, value: Any) -> Any:
        # "EuclideanSquared" -> "euclideanSquared"
        if isinstance(value, str) and value[:1].isupper():
            return value[0].lower() + value[1:]
        return value


class ConstantConf(ConfFragment):
    fragment: ClassVar[str] = "Constant"

    constant: float = 0.0


class RidgedMultiConf(ConfFragment):
    fragment: ClassVar[str] = "RidgedMulti"

    attenuation: float = 2.0


FRAGMENT_TYPES: Dict[str, Type[ConfFragment]] = {
    cls.fragment: cls
    for cls in (MultiFractalConf, SeedableConf, WorleyConf, ConstantConf, RidgedMultiConf)
}


class ParameterLimits:
    """
    Inclusive (min, max) bounds for numeric fragment fields.

    Fragments carry their own defaults; generators clamp the values they
    receive through these tables before using them.
    """

    def __init__(self, bounds: Dict[str, Tuple[float, float]]):
        self.bounds = bounds

    def clamp(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Copy of `values` with every bounded entry clamped; other entries pass through."""

        result = dict(values)
        for name, (min_val, max_val) in self.bounds.items():
            if name in result:
                result[name] = max(min_val, min(max_val, result[name]))
        return result


MULTIFRACTAL_LIMITS = ParameterLimits({
    "octaves": (1, 32),
    "frequency": (1e-6, 1e6),
    "lacunarity": (1e-3, 64.0),
    "persistence": (0.0, 4.0),
})

WORLEY_LIMITS = ParameterLimits({
    "worley_frequency": (1e-6, 1e6),
    "displacement": (-1e6, 1e6),
})

RIDGED_LIMITS = ParameterLimits({
    "attenuation": (1e-3, 1e3),
})


# IR setting key -> (fragment class, field name).  `moduleType` selects the
# generator kind and is never part of a fragment.
MODULE_TYPE_KEY = "moduleType"

SETTING_KEYS: Dict[str, Tuple[Type[ConfFragment], str]] = {
    "octaves": (MultiFractalConf, "octaves"),
    "frequency": (MultiFractalConf, "frequency"),
    "lacunarity": (MultiFractalConf, "lacunarity"),
    "persistence": (MultiFractalConf, "persistence"),
    "seed": (SeedableConf, "seed"),
    "rangeFunction": (WorleyConf, "range_function"),
    "enableRange": (WorleyConf, "range_function_enabled"),
    "worleyFrequency": (WorleyConf, "worley_frequency"),
    "displacement": (WorleyConf, "displacement"),
    "constant": (ConstantConf, "constant"),
    "attenuation": (RidgedMultiConf, "attenuation"),
}


def map_setting_to_fragment(key: str) -> Optional[Tuple[Type[ConfFragment], str]]:
    """
    Match an IR setting key to the fragment it configures.

    Returns None for `moduleType`, which is known but not a fragment key.
    Raises ConfigError for keys with no mapping.
    """
    if key == MODULE_TYPE_KEY:
        return None
    try:
        return SETTING_KEYS[key]
    except KeyError:
        raise ConfigError(f"Unable to match setting with key {key} to a configuration fragment!") from None


class ModuleRegistry:
    """
    Registry for noise generator kinds.

    Manages kind registration, lookup, and the fragments each kind accepts.
    """

    def __init__(self):
        self.modules: Dict[str, Callable] = {}
        self.accepted_fragments: Dict[str, Tuple[Type[ConfFragment], ...]] = {}
        self.name_to_id: Dict[str, int] = {}
        self._next_id = 0

    def register(self, name: str, factory: Callable, accepted: Tuple[Type[ConfFragment], ...]):
        """Register a new generator kind."""

        module_id = self._next_id
        self._next_id += 1

        self.modules[name] = factory
        self.accepted_fragments[name] = accepted
        self.name_to_id[name] = module_id

    def __contains__(self, name: str) -> bool:
        return name in self.modules

    def get_factory(self, name: str) -> Callable:
        """Get generator factory by kind name."""
        if name not in self.modules:
            raise ConfigError(f"Unknown noise module type: {name}")
        return self.modules[name]

    def get_accepted_fragments(self, name: str) -> Tuple[Type[ConfFragment], ...]:
        """Get the fragment classes a kind can be configured with."""
        if name not in self.accepted_fragments:
            raise ConfigError(f"Unknown noise module type: {name}")
        return self.accepted_fragments[name]

    def list_modules(self) -> List[Tuple[int, str]]:
        """List all registered kinds as (id, name) pairs."""
        return [(module_id, name) for name, module_id in self.name_to_id.items()]
