"""Configuration validation using JSON Schema for early error detection."""

from jsonschema import validate, ValidationError
from typing import Dict, Any

from ..exceptions import ConfigurationError


_MODE_LIST = {
    "type": ["array", "null"],
    "items": {"type": "integer", "enum": [32, 64]},
}

_SETTINGS = {
    "type": "object",
    "additionalProperties": {"type": ["string", "integer", "boolean"]},
    "description": "CMake settings passed to init-build.sh as -DKEY=VALUE",
}

# Schema for seL4-platforms platforms.yml
PLATFORMS_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "modes": {
            "type": "array",
            "items": {"type": "integer"},
            "minItems": 1,
            "description": "Word sizes known to the build system",
        },
        "architectures": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
            "description": "Architectures known to the build system",
        },
        "platforms": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "arch": {"type": "string", "description": "One of architectures"},
                    "modes": {
                        "type": "array",
                        "items": {"type": "integer", "enum": [32, 64]},
                        "minItems": 1,
                        "description": "Supported modes",
                    },
                    "smp": _MODE_LIST,
                    "aarch_hyp": _MODE_LIST,
                    "platform": {"type": "string", "minLength": 1},
                    "image_platform": {"type": "string"},
                    "simulation_binary": {"type": "string"},
                    "march": {"type": "string"},
                    "req": {"type": ["array", "null"], "items": {"type": "string"}},
                    "disabled": {"type": ["boolean", "null"]},
                    "no_hw_build": {"type": ["boolean", "null"]},
                },
                "required": ["arch", "modes", "platform"],
                "additionalProperties": False,
            },
            "description": "Platform definitions keyed by platform name",
        },
        "mcs_unsupported_platforms": {
            "type": ["array", "null"],
            "items": {"type": "string"},
        },
    },
    "required": ["modes", "architectures", "platforms"],
}

# Schema for build matrix files such as cparser-run builds.yml
BUILDS_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "default": {
            "type": "object",
            "properties": {"settings": _SETTINGS},
        },
        "builds": {
            "type": "array",
            "items": {
                "type": "object",
                "minProperties": 1,
                "maxProperties": 1,
                "additionalProperties": {
                    "type": "object",
                    "properties": {
                        "platform": {"type": "string", "minLength": 1},
                        "mode": {"type": "integer", "enum": [32, 64]},
                        "l4v_arch": {"type": "string"},
                        "settings": _SETTINGS,
                    },
                    "required": ["platform"],
                },
            },
            "description": "List of single-key mappings: build name -> definition",
        },
    },
    "required": ["builds"],
}


class ConfigValidator:
    """Configuration validator with schema validation and detailed error reporting."""

    @staticmethod
    def validate_config(config: Dict[str, Any], schema: Dict[str, Any]) -> None:
        """Validate configuration against schema.

        Args:
            config: Configuration dictionary to validate
            schema: JSON schema to validate against

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            validate(instance=config, schema=schema)
        except ValidationError as e:
            path = '.'.join(str(p) for p in e.path) if e.path else 'root'
            raise ValueError(
                f"Configuration validation failed:\n"
                f"  Location: {path}\n"
                f"  Error: {e.message}\n"
                f"  Schema: {e.schema.get('description', 'N/A')}"
            )


__all__ = [
    "ConfigValidator",
    "ConfigurationError",
    "PLATFORMS_SCHEMA",
    "BUILDS_SCHEMA",
]
