"""Tests for depbump.lib.validate module."""

import pytest

from depbump.lib.errors import ValidationError
from depbump.lib.types import PackageSpec
from depbump.lib.validate import (
    parse_package_spec,
    validate,
    validate_package,
    validate_package_name,
    validate_package_version,
)


class TestPackageName:

    @pytest.mark.parametrize("name", ["@zz-common/zz-ui", "zz-common/zz-ui", "@Scope/Pkg-2"])
    def test_valid(self, name):
        assert validate_package_name(name) is None

    @pytest.mark.parametrize("name", ["react", "@scope/", "@scope/ui/extra", "@sc ope/ui", "@scope/ui_x"])
    def test_invalid(self, name):
        error = validate_package_name(name)
        assert error is not None
        assert "@zz-common/zz-ui" in error

    def test_empty(self):
        assert validate_package_name("") == "Package name is required"


class TestPackageVersion:

    @pytest.mark.parametrize("version", ["6.3.56", "0.0.1", "1.2.3-beta.1"])
    def test_valid(self, version):
        assert validate_package_version(version) is None

    @pytest.mark.parametrize("version", ["6.3", "^6.3.56", "latest", "v1.2.3", "1.2.3-"])
    def test_invalid(self, version):
        assert validate_package_version(version) is not None

    def test_pair_reports_first_error(self):
        assert "name" in validate_package("bad", "bad")
        assert validate_package("@a/b", "1.0.0") is None


class TestParsePackageSpec:

    def test_scoped(self):
        assert parse_package_spec("@zz-common/zz-ui@6.3.56") == PackageSpec("@zz-common/zz-ui", "6.3.56")

    def test_missing_version(self):
        with pytest.raises(ValidationError):
            parse_package_spec("@zz-common/zz-ui")

    def test_bad_version(self):
        with pytest.raises(ValidationError):
            parse_package_spec("@zz-common/zz-ui@next")


class TestSchemaValidation:

    def test_preset_schema_error_has_path(self):
        with pytest.raises(ValidationError) as exc_info:
            validate({"packages": [{"name": "@a/b"}], "branches": ["web-x"]}, "preset")
        assert exc_info.value.schema_name == "preset"
        assert exc_info.value.path == "packages.0"

    def test_unknown_schema(self):
        with pytest.raises(ValidationError) as exc_info:
            validate({}, "nonexistent_schema_xyz")
        assert "not found" in str(exc_info.value)
