"""Structural validation of the services XML document."""

from __future__ import annotations

import xml.etree.ElementTree as ElementTree

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import SchemaValidationError
from .models import NAME_FIELD, PASSWORD_FIELD, SERVICE_FIELDS, URL_FIELD, USER_FIELD, ServiceRecord

ROOT_ELEMENT = "services"
SERVICE_ELEMENT = "service"


class ServiceElement(BaseModel):
    """Shape of a single <service> element."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(alias=NAME_FIELD)
    url_variable: str = Field(alias=URL_FIELD)
    user_variable: str = Field(alias=USER_FIELD)
    password_variable: str = Field(alias=PASSWORD_FIELD)

    def to_record(self) -> ServiceRecord:
        return ServiceRecord(
            name=self.name,
            url_variable=self.url_variable,
            user_variable=self.user_variable,
            password_variable=self.password_variable,
        )


class ServicesDocument(BaseModel):
    """Shape of the <services> root element."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    services: tuple[ServiceElement, ...] = ()


def validate_document(text: str | bytes) -> ServicesDocument:
    """Parse and structurally validate a services document.

    Raises SchemaValidationError for malformed markup, an unexpected root,
    unknown or duplicated elements, stray text or attributes, and missing
    required fields. Bytes are decoded by the parser using the document's
    declared encoding.
    """

    try:
        root = ElementTree.fromstring(text)
    except (ElementTree.ParseError, ValueError) as exc:
        raise SchemaValidationError(f"The services document is not well-formed XML: {exc}") from exc

    if root.tag != ROOT_ELEMENT:
        raise SchemaValidationError(
            f"Expected root element <{ROOT_ELEMENT}>, found <{root.tag}>."
        )
    _reject_attributes(root)
    _reject_text(root, f"<{ROOT_ELEMENT}>")

    raw_services: list[dict[str, str]] = []
    for index, element in enumerate(root, start=1):
        if element.tag != SERVICE_ELEMENT:
            raise SchemaValidationError(
                f"Unexpected element <{element.tag}> in <{ROOT_ELEMENT}>; only <{SERVICE_ELEMENT}> is allowed."
            )
        raw_services.append(_read_service(element, index))

    try:
        return ServicesDocument.model_validate({"services": raw_services})
    except PydanticValidationError as exc:
        raise SchemaValidationError(_describe(exc)) from exc


def _read_service(element: ElementTree.Element, index: int) -> dict[str, str]:
    where = f"<{SERVICE_ELEMENT}> #{index}"
    _reject_attributes(element)
    _reject_text(element, where)
    fields: dict[str, str] = {}
    for child in element:
        if child.tag not in SERVICE_FIELDS:
            raise SchemaValidationError(f"Unexpected element <{child.tag}> in {where}.")
        if child.tag in fields:
            raise SchemaValidationError(f"Duplicate element <{child.tag}> in {where}.")
        if len(child):
            raise SchemaValidationError(f"Element <{child.tag}> in {where} must contain text only.")
        _reject_attributes(child)
        fields[child.tag] = child.text or ""
    return fields


def _reject_attributes(element: ElementTree.Element) -> None:
    if element.attrib:
        names = ", ".join(sorted(element.attrib))
        raise SchemaValidationError(f"Element <{element.tag}> does not accept attributes ({names}).")


def _reject_text(element: ElementTree.Element, where: str) -> None:
    chunks = [element.text or ""]
    chunks.extend(child.tail or "" for child in element)
    if any(chunk.strip() for chunk in chunks):
        raise SchemaValidationError(f"Unexpected text content in {where}.")


def _describe(exc: PydanticValidationError) -> str:
    problems: list[str] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        # loc looks like ("services", <index>, <field>)
        if len(loc) >= 3 and loc[0] == "services":
            where = f"<{SERVICE_ELEMENT}> #{int(loc[1]) + 1}"
            field = loc[2]
            problems.append(f"{where}: <{field}> {error.get('msg', 'is invalid').lower()}")
        else:
            problems.append(f"{'.'.join(str(part) for part in loc)}: {error.get('msg')}")
    return "The services document does not match the schema: " + "; ".join(problems)


__all__ = [
    "ROOT_ELEMENT",
    "SERVICE_ELEMENT",
    "ServiceElement",
    "ServicesDocument",
    "validate_document",
]
