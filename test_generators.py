"""
Tests for the generator catalog and the noise generators.
"""

import logging

import numpy as np
import pytest

from noisetree.errors import ConfigError
from noisetree.procgen import (
    ConstantConf, GeneratorSpec, MultiFractalConf, RidgedMultiConf, SeedableConf, WorleyConf,
    build_generator, default_catalog
)
from noisetree.procgen.grammar import MULTIFRACTAL_LIMITS, RangeFunction, map_setting_to_fragment
from noisetree.procgen.modules import noise

ALL_KINDS = [
    "Fbm", "Worley", "OpenSimplex", "Billow", "HybridMulti",
    "SuperSimplex", "Value", "RidgedMulti", "BasicMulti", "Constant"
]

POINT = (0.37, 1.21, 2.53)


def test_catalog_lists_every_kind():
    assert default_catalog.list_kinds() == ALL_KINDS


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_every_kind_samples_finite_floats(kind):
    generator = build_generator(GeneratorSpec(kind, [SeedableConf(seed="test")]))

    value = generator.get(POINT)

    assert isinstance(value, float)
    assert np.isfinite(value)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_array_input_matches_scalar_input(kind):
    generator = build_generator(GeneratorSpec(kind, [SeedableConf(seed=3)]))
    xs = np.array([[0.1, 5.7], [-3.2, 11.9]])
    ys = np.array([[2.2, 0.4], [7.7, -1.5]])

    values = generator.get((xs, ys, 0.6))

    assert values.shape == (2, 2)
    expected = [[generator.get((x, y, 0.6)) for x, y in zip(row_x, row_y)] for row_x, row_y in zip(xs, ys)]
    np.testing.assert_allclose(values, expected)


@pytest.mark.parametrize("kind", ["Fbm", "Billow", "RidgedMulti", "Value", "Worley", "OpenSimplex"])
def test_seeds_are_deterministic(kind):
    first = build_generator(GeneratorSpec(kind, [SeedableConf(seed="same")]))
    second = build_generator(GeneratorSpec(kind, [SeedableConf(seed="same")]))
    other = build_generator(GeneratorSpec(kind, [SeedableConf(seed="other")]))

    points = [POINT, (4.6, -2.3, 0.9), (10.1, 3.3, 7.8)]

    assert [first.get(p) for p in points] == [second.get(p) for p in points]
    assert [first.get(p) for p in points] != [other.get(p) for p in points]


def test_fbm_stays_in_range():
    generator = build_generator(GeneratorSpec("Fbm", [MultiFractalConf(octaves=5)]))
    xs, ys = np.meshgrid(np.linspace(-20, 20, 64), np.linspace(-20, 20, 64))

    values = generator.get((xs, ys, 1.5))

    assert np.all(np.abs(values) <= 1.5)
    assert values.std() > 0.0


def test_constant_generator():
    generator = build_generator(GeneratorSpec("Constant", [ConstantConf(constant=0.42)]))

    assert generator.get((1.0, 2.0, 3.0)) == pytest.approx(0.42)
    np.testing.assert_allclose(generator.get((np.zeros(3), 0.0, 0.0)), [0.42, 0.42, 0.42])


def test_multifractal_params_are_clamped():
    generator = build_generator(GeneratorSpec("Fbm", [MultiFractalConf(octaves=100, persistence=0.25)]))

    assert generator.octaves == MULTIFRACTAL_LIMITS.bounds["octaves"][1]
    assert generator.persistence == pytest.approx(0.25)


def test_ridged_multi_accepts_attenuation():
    generator = build_generator(GeneratorSpec("RidgedMulti", [RidgedMultiConf(attenuation=4.0)]))

    assert generator.attenuation == pytest.approx(4.0)


def test_worley_conf():
    generator = build_generator(GeneratorSpec("Worley", [
        WorleyConf(range_function="euclideanSquared", range_function_enabled=True, displacement=0.0)
    ]))

    assert generator.enable_range is True
    # Without displacement, output is the rescaled distance alone
    assert generator.get(POINT) >= -1.0


def test_unknown_kind_is_config_error():
    with pytest.raises(ConfigError):
        build_generator(GeneratorSpec("Perlin"))


def test_unusable_fragment_logs_warning(caplog):
    with caplog.at_level(logging.WARNING):
        generator = build_generator(GeneratorSpec("Value", [MultiFractalConf(octaves=2), SeedableConf(seed=9)]))

    assert generator.seed == SeedableConf(seed="9").numeric_seed()
    assert "Invalid configuration provided to Value module" in caplog.text


def test_setting_key_table():
    assert map_setting_to_fragment("octaves") == (MultiFractalConf, "octaves")
    assert map_setting_to_fragment("enableRange") == (WorleyConf, "range_function_enabled")
    assert map_setting_to_fragment("moduleType") is None
    with pytest.raises(ConfigError):
        map_setting_to_fragment("nope")


def test_string_seeds_hash_to_32_bits():
    seed = SeedableConf(seed="cXEL5v9dTsCgCnkgdd43XWZS6Q9c44AD").numeric_seed()

    assert 0 <= seed <= 0xFFFFFFFF


def test_integer_seed_reads_as_its_decimal_string():
    assert SeedableConf(seed=7).seed == "7"
    assert SeedableConf(seed=7).numeric_seed() == SeedableConf(seed="7").numeric_seed()
    assert SeedableConf.model_validate_json('{"seed": -1}').seed == "-1"


def test_gradient_noise_is_zero_on_lattice():
    ints = np.array([0.0, 1.0, -4.0, 12.0])

    np.testing.assert_allclose(noise.gradient_noise(ints, ints, ints, seed=5), 0.0, atol=1e-12)


def test_range_functions():
    d = noise.RANGE_FUNCTIONS

    assert d["euclidean"](3.0, 4.0, 0.0) == pytest.approx(5.0)
    assert d["euclideanSquared"](3.0, 4.0, 0.0) == pytest.approx(25.0)
    assert d["manhattan"](-3.0, 4.0, 1.0) == pytest.approx(8.0)
    assert d["chebyshev"](-3.0, 4.0, 1.0) == pytest.approx(4.0)


def test_registry_lists_kinds_in_registration_order():
    registry = default_catalog.registry

    assert "Worley" in registry
    assert "Composed" not in registry
    assert sorted(registry.list_modules())[0] == (0, "Fbm")
    assert registry.get_accepted_fragments("Constant") == (ConstantConf,)


def test_limits_clamp_only_bounded_fields():
    clamped = MULTIFRACTAL_LIMITS.clamp({"octaves": 0, "frequency": 3.0, "extra": "kept"})

    assert clamped == {"octaves": 1, "frequency": 3.0, "extra": "kept"}


def test_worley_accepts_variant_spellings():
    assert WorleyConf(range_function="EuclideanSquared").range_function is RangeFunction.EUCLIDEAN_SQUARED
    assert WorleyConf(range_function="Chebyshev").range_function is RangeFunction.CHEBYSHEV
    assert WorleyConf(range_function="manhattan").range_function is RangeFunction.MANHATTAN
