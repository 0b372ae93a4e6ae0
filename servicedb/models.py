"""Service entry records and the field rules they must satisfy."""

from __future__ import annotations

from dataclasses import dataclass

from .envnames import EnvironmentNameValidator
from .errors import ValidationError

NAME_FIELD = "name"
URL_FIELD = "db-url-env"
USER_FIELD = "db-user-env"
PASSWORD_FIELD = "db-password-env"

SERVICE_FIELDS: tuple[str, ...] = (NAME_FIELD, URL_FIELD, USER_FIELD, PASSWORD_FIELD)


def check_field(label: str, value: str | None) -> None:
    """Reject missing, empty, blank or padded field values.

    The checks are ordered; the first failing one determines the message.
    """

    if value is None:
        raise ValidationError(f"{label} is missing from the configuration.")
    if value == "":
        raise ValidationError(f"{label} is empty.")
    trimmed = value.strip()
    if trimmed == "":
        raise ValidationError(f"{label} is blank.")
    if trimmed != value:
        raise ValidationError(f"{label} has either leading or trailing whitespace characters.")


def check_environment_variable_name(
    label: str,
    value: str | None,
    validator: EnvironmentNameValidator,
) -> None:
    """Apply the generic field rules, then the OS environment variable grammar."""

    check_field(label, value)
    if not validator.is_valid(value):
        raise ValidationError(f"{label} is not a valid environment variable name [{value}].")


@dataclass(frozen=True, slots=True)
class ServiceEntry:
    """A validated binding from a service to its credential variables."""

    name: str
    url_variable: str
    user_variable: str
    password_variable: str

    def variables(self) -> tuple[str, str, str]:
        return self.url_variable, self.user_variable, self.password_variable


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a ServiceRecord: exactly one of entry/error is set."""

    entry: ServiceEntry | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ServiceEntry:
        if self.error is not None:
            raise self.error
        if self.entry is None:
            raise ValueError("ValidationResult holds neither an entry nor an error.")
        return self.entry


@dataclass(frozen=True, slots=True)
class ServiceRecord:
    """Plain, unvalidated field values read from one <service> element."""

    name: str | None = None
    url_variable: str | None = None
    user_variable: str | None = None
    password_variable: str | None = None

    def validate(self, validator: EnvironmentNameValidator | None = None) -> ValidationResult:
        """Run every field rule and build the entry, capturing the first failure."""

        checker = validator or EnvironmentNameValidator()
        try:
            check_field(f"The service {NAME_FIELD} field", self.name)
            for field_name, value in (
                (URL_FIELD, self.url_variable),
                (USER_FIELD, self.user_variable),
                (PASSWORD_FIELD, self.password_variable),
            ):
                check_environment_variable_name(
                    f"The {self.name} service {field_name} field",
                    value,
                    checker,
                )
        except ValidationError as exc:
            return ValidationResult(error=exc)
        return ValidationResult(
            entry=ServiceEntry(
                name=self.name,  # type: ignore[arg-type]
                url_variable=self.url_variable,  # type: ignore[arg-type]
                user_variable=self.user_variable,  # type: ignore[arg-type]
                password_variable=self.password_variable,  # type: ignore[arg-type]
            )
        )


__all__ = [
    "NAME_FIELD",
    "PASSWORD_FIELD",
    "SERVICE_FIELDS",
    "ServiceEntry",
    "ServiceRecord",
    "URL_FIELD",
    "USER_FIELD",
    "ValidationResult",
    "check_environment_variable_name",
    "check_field",
]
