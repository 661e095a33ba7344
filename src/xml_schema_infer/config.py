"""Run configuration shared by the tree builder and every emitter.

The command line (or the HTTP service) builds exactly one
:class:`InferenceConfig` per run and passes it explicitly to
:class:`~xml_schema_infer.tree_builder.TreeBuilder` and to the selected
emitter. It is frozen so that nothing downstream can alter naming or type
inference behaviour halfway through a run.

Typical usage::

    from xml_schema_infer.config import InferenceConfig, OutputMode

    config = InferenceConfig(name_prefix="Doc", use_type=True)
    mode = OutputMode.STRUCT_DEFINITIONS

Environment overrides (used by the HTTP service)::

    XML_SCHEMA_INFER_CONFIG="use_type=true,name_prefix=Doc,progress_interval=1000"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError

CONFIG_ENV_VAR = "XML_SCHEMA_INFER_CONFIG"

DEFAULT_PROGRESS_INTERVAL = 50000
DEFAULT_CHUNK_SIZE = 64 * 1024


class OutputMode(str, Enum):
    """The single kind of output produced by one run."""

    CONVERSION_CODE = "conversion"
    STRUCT_DEFINITIONS = "structs"
    TARGET_CLASSES = "java"


@dataclass(frozen=True)
class InferenceConfig:
    """Immutable options controlling inference and code emission.

    Args:
        name_prefix: Prefix for generated type names; must start with an
            uppercase letter so Go types are exported.
        name_suffix: Suffix for generated type names.
        attribute_prefix: Prefix for fields generated from XML attributes.
        use_type: Infer boolean/integer/decimal types from observed text;
            when False every value is treated as a string.
        namespace_in_json_name: Prefix JSON names with the namespace prefix
            followed by two underscores.
        pretty_print: Pretty-print JSON in generated conversion code.
        add_xml_name: Expose each element's ``XMLName`` (space, local) in JSON.
        progress: Log progress while reading large documents.
        progress_interval: Number of start tags between progress reports.
        java_base_dir: Root directory of the generated Maven project.
        java_app_name: Application name appended to ``java_base_package``.
        java_base_package: Base Java package for generated classes.
        chunk_size: Bytes read from the source per parser feed.
    """

    name_prefix: str = "X"
    name_suffix: str = ""
    attribute_prefix: str = "Attr"
    use_type: bool = False
    namespace_in_json_name: bool = False
    pretty_print: bool = False
    add_xml_name: bool = False
    progress: bool = False
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    java_base_dir: str = "java"
    java_app_name: str = "jaxb"
    java_base_package: str = "io.xmlschemainfer"
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.name_prefix and not self.name_prefix[0].isupper():
            raise ConfigurationError(
                f"Type name prefix must start with a capital letter: {self.name_prefix!r}"
            )
        if self.progress_interval <= 0:
            raise ConfigurationError("progress_interval must be > 0")
        if self.chunk_size <= 0:
            raise ConfigurationError("chunk_size must be > 0")
        if not self.java_app_name.isidentifier():
            raise ConfigurationError(
                f"Java app name must be a valid identifier: {self.java_app_name!r}"
            )
        if not all(part.isidentifier() for part in self.java_base_package.split(".")):
            raise ConfigurationError(
                f"Invalid Java package name: {self.java_base_package!r}"
            )

    @property
    def java_package(self) -> str:
        """Fully qualified package of the generated ``Main`` class."""
        return f"{self.java_base_package}.{self.java_app_name}"

    def with_overrides(self, **overrides: Any) -> "InferenceConfig":
        """Return a copy with the non-``None`` overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> InferenceConfig:
    """Build a configuration from ``XML_SCHEMA_INFER_CONFIG``.

    The variable holds comma separated ``key=value`` pairs. Unknown keys are
    rejected so that typos do not silently fall back to defaults.

    Raises:
        ConfigurationError: On unknown keys or unparsable values.
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(CONFIG_ENV_VAR, "")
    known = {f.name: f for f in fields(InferenceConfig)}
    values: Dict[str, Any] = {}

    for pair in raw.split(","):
        if "=" not in pair:
            continue
        key, value = (part.strip() for part in pair.split("=", 1))
        if key not in known:
            raise ConfigurationError(f"Unknown configuration key in {CONFIG_ENV_VAR}: {key}")
        default = getattr(InferenceConfig, key)
        if isinstance(default, bool):
            values[key] = value.lower() == "true"
        elif isinstance(default, int):
            try:
                values[key] = int(value)
            except ValueError as exc:
                raise ConfigurationError(f"{key} must be an integer, got {value!r}") from exc
        else:
            values[key] = value

    return InferenceConfig(**values)
