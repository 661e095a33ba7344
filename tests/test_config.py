from dataclasses import FrozenInstanceError

import pytest

from xml_schema_infer.config import (
    CONFIG_ENV_VAR,
    InferenceConfig,
    OutputMode,
    config_from_env,
)
from xml_schema_infer.errors import ConfigurationError


def test_defaults():
    config = InferenceConfig()
    assert config.name_prefix == "X"
    assert config.attribute_prefix == "Attr"
    assert config.use_type is False
    assert config.java_package == "io.xmlschemainfer.jaxb"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name_prefix": "x"},
        {"progress_interval": 0},
        {"chunk_size": -1},
        {"java_app_name": "my-app"},
        {"java_base_package": "io..bad"},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        InferenceConfig(**overrides)


def test_empty_prefix_allowed():
    assert InferenceConfig(name_prefix="").name_prefix == ""


def test_with_overrides_skips_none():
    config = InferenceConfig(use_type=True)
    assert config.with_overrides(use_type=None, name_prefix=None) is config

    updated = config.with_overrides(name_prefix="Doc")
    assert updated.name_prefix == "Doc"
    assert updated.use_type is True


def test_config_is_frozen():
    config = InferenceConfig()
    with pytest.raises(FrozenInstanceError):
        config.use_type = True


def test_config_from_env():
    config = config_from_env(
        {CONFIG_ENV_VAR: "use_type=true, name_prefix=Doc,progress_interval=10"}
    )
    assert config.use_type is True
    assert config.name_prefix == "Doc"
    assert config.progress_interval == 10
    assert config_from_env({}) == InferenceConfig()


@pytest.mark.parametrize(
    "raw",
    ["colour=blue", "chunk_size=big", "name_prefix=lower"],
)
def test_config_from_env_rejects_bad_values(raw):
    with pytest.raises(ConfigurationError):
        config_from_env({CONFIG_ENV_VAR: raw})


def test_output_mode_values():
    assert OutputMode("structs") is OutputMode.STRUCT_DEFINITIONS
    assert OutputMode("conversion") is OutputMode.CONVERSION_CODE
    assert OutputMode("java") is OutputMode.TARGET_CLASSES
