"""Tests for OS detection and environment variable name validation."""

from __future__ import annotations

import pytest

from servicedb.envnames import EnvironmentNameValidator, OsType, detect_os_type


@pytest.mark.parametrize(
    ("system_name", "expected"),
    [
        ("Windows", OsType.WINDOWS),
        ("Linux", OsType.LINUX),
        ("Darwin", OsType.MACOS),
        ("Mac OS X", OsType.MACOS),
        ("Java", OsType.OTHER),
        ("", OsType.OTHER),
    ],
)
def test_detect_os_type_classifies_platform_names(system_name: str, expected: OsType) -> None:
    assert detect_os_type(system_name) is expected


@pytest.mark.parametrize("candidate", ["DATABASE_URL", "_PRIVATE", "A1", "DB_2_USER"])
def test_windows_accepts_upper_case_names(candidate: str) -> None:
    assert EnvironmentNameValidator(OsType.WINDOWS).is_valid(candidate) is True


@pytest.mark.parametrize("candidate", ["database_url", "Db_Url", "1DB", "A", "", "DB-URL", "DB URL", "DB_URL\n"])
def test_windows_rejects_other_names(candidate: str) -> None:
    assert EnvironmentNameValidator(OsType.WINDOWS).is_valid(candidate) is False


@pytest.mark.parametrize("os_type", [OsType.LINUX, OsType.MACOS, OsType.OTHER])
@pytest.mark.parametrize("candidate", ["DATABASE_URL", "database_url", "Db_Url", "_x1"])
def test_posix_accepts_mixed_case_names(os_type: OsType, candidate: str) -> None:
    assert EnvironmentNameValidator(os_type).is_valid(candidate) is True


@pytest.mark.parametrize("candidate", ["", "x", "9LIVES", "db.url", "db$url", " DB_URL", "DB_URL "])
def test_posix_rejects_names_outside_grammar(candidate: str) -> None:
    assert EnvironmentNameValidator(OsType.LINUX).is_valid(candidate) is False


def test_validator_rejects_non_strings() -> None:
    validator = EnvironmentNameValidator(OsType.LINUX)

    assert validator.is_valid(None) is False
    assert validator.is_valid(42) is False
    assert validator.os_type is OsType.LINUX
