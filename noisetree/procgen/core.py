"""
Generator catalog: turns a kind tag plus configuration fragments into
a configured noise generator.
"""

import logging
from typing import List, Optional, Sequence

from .grammar import (
    ConfFragment,
    ConstantConf,
    ModuleRegistry,
    MultiFractalConf,
    RidgedMultiConf,
    SeedableConf,
    WorleyConf,
)
from .generators import (
    BasicMultiGenerator,
    BillowGenerator,
    ConstantGenerator,
    FbmGenerator,
    HybridMultiGenerator,
    NoiseGenerator,
    OpenSimplexGenerator,
    RidgedMultiGenerator,
    SuperSimplexGenerator,
    ValueGenerator,
    WorleyGenerator,
)

logger = logging.getLogger(__name__)


class GeneratorSpec:
    """A generator kind tag and the fragments used to configure it."""

    def __init__(self, kind: str, confs: Optional[Sequence[ConfFragment]] = None):
        self.kind = kind
        self.confs: List[ConfFragment] = list(confs or [])

    def __repr__(self) -> str:
        return f"GeneratorSpec({self.kind!r}, {self.confs!r})"


class GeneratorCatalog:
    """
    Catalog of every noise generator kind available to composition trees.

    This catalog:
    - Registers each kind with the fragments it accepts
    - Builds configured generator instances from a GeneratorSpec
    - Skips fragments a kind cannot use, logging a warning
    """

    def __init__(self):
        self.registry = ModuleRegistry()

        # Register built-in generators
        self._register_builtin_modules()

    def _register_builtin_modules(self):
        """Register all built-in generator kinds."""

        fractal = (MultiFractalConf, SeedableConf)

        self.registry.register("Fbm", FbmGenerator, fractal)
        self.registry.register("Worley", WorleyGenerator, (SeedableConf, WorleyConf))
        self.registry.register("OpenSimplex", OpenSimplexGenerator, (SeedableConf,))
        self.registry.register("Billow", BillowGenerator, fractal)
        self.registry.register("HybridMulti", HybridMultiGenerator, fractal)
        self.registry.register("SuperSimplex", SuperSimplexGenerator, (SeedableConf,))
        self.registry.register("Value", ValueGenerator, (SeedableConf,))
        self.registry.register("RidgedMulti", RidgedMultiGenerator, fractal + (RidgedMultiConf,))
        self.registry.register("BasicMulti", BasicMultiGenerator, fractal)
        self.registry.register("Constant", ConstantGenerator, (ConstantConf,))

    def build(self, spec: GeneratorSpec) -> NoiseGenerator:
        """
        Build a configured generator.

        Args:
            spec: Kind tag and configuration fragments

        Returns:
            NoiseGenerator: The configured generator

        Raises:
            ConfigError: If the kind tag is not registered
        """

        factory = self.registry.get_factory(spec.kind)
        accepted = self.registry.get_accepted_fragments(spec.kind)

        generator = factory()
        for conf in spec.confs:
            if not isinstance(conf, accepted):
                logger.warning(
                    "Invalid configuration provided to %s module: %s %r",
                    spec.kind, conf.fragment, conf
                )
                continue
            generator.configure(conf)

        return generator

    def list_kinds(self) -> List[str]:
        """Names of every registered kind, in registration order."""
        return [name for _, name in sorted(self.registry.list_modules())]


default_catalog = GeneratorCatalog()


def build_generator(spec: GeneratorSpec) -> NoiseGenerator:
    """Build a generator with the default catalog."""
    return default_catalog.build(spec)
