"""
Validation for depbump.

Schema validation for everything read from or written to the config file,
plus the package name/version rules applied to operator input.
"""

import json
from pathlib import Path

import jsonschema

from depbump.lib.constants import (
    EXAMPLE_PACKAGE_NAME,
    EXAMPLE_PACKAGE_VERSION,
    PACKAGE_NAME_PATTERN,
    PACKAGE_VERSION_PATTERN,
)
from depbump.lib.errors import ValidationError
from depbump.lib.types import PackageSpec


# Cache loaded schemas
_schema_cache: dict[str, dict] = {}


def _get_schemas_dir() -> Path:
    """Get path to the bundled schemas directory."""
    return Path(__file__).parent.parent / "schemas"


def _load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = _get_schemas_dir() / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(f"Schema file not found: {schema_path}", schema_name)
        _schema_cache[schema_name] = json.loads(schema_path.read_text())
    return _schema_cache[schema_name]


def validate(data: dict, schema_name: str) -> None:
    """
    Validate data against named schema.

    Args:
        data: Dictionary to validate
        schema_name: Schema name (e.g., "config", "preset")

    Raises:
        ValidationError: If validation fails
    """
    schema = _load_schema(schema_name)

    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) if e.absolute_path else "(root)"
        raise ValidationError(e.message, schema_name, path) from None


def validate_before_write(data: dict, schema_name: str, filepath: Path) -> None:
    """
    Validate data before writing to file. Ensures we never write invalid data.

    Raises:
        ValidationError: If data doesn't match schema
    """
    try:
        validate(data, schema_name)
    except ValidationError as e:
        raise ValidationError(
            f"Refusing to write invalid data to {filepath}: {e}",
            schema_name,
        ) from None


def validate_package_name(name: str) -> str | None:
    """Return an error message for a bad package name, or None if valid."""
    if not name:
        return "Package name is required"
    if not PACKAGE_NAME_PATTERN.match(name):
        return f"Invalid package name '{name}', expected scope/name like {EXAMPLE_PACKAGE_NAME}"
    return None


def validate_package_version(version: str) -> str | None:
    """Return an error message for a bad version, or None if valid."""
    if not version:
        return "Version is required"
    if not PACKAGE_VERSION_PATTERN.match(version):
        return f"Invalid version '{version}', expected semver like {EXAMPLE_PACKAGE_VERSION}"
    return None


def validate_package(name: str, version: str) -> str | None:
    """Validate a name/version pair. Returns the first error message, or None."""
    return validate_package_name(name) or validate_package_version(version)


def parse_package_spec(text: str) -> PackageSpec:
    """
    Parse "name@version" (e.g. "@scope/ui@1.2.3") into a PackageSpec.

    The split happens at the last '@' so scoped names keep their leading '@'.

    Raises:
        ValidationError: If the text is not a valid spec
    """
    name, sep, version = text.strip().rpartition("@")
    if not sep or not name:
        raise ValidationError(f"Invalid package spec '{text}', expected name@version")
    error = validate_package(name, version)
    if error:
        raise ValidationError(error)
    return PackageSpec(name=name, version=version)
