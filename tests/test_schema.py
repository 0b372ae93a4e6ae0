"""Tests for structural validation of the services document."""

from __future__ import annotations

import pytest

from servicedb.errors import SchemaValidationError
from servicedb.schema import validate_document

from .conftest import ORDERS_XML


def _service(body: str) -> str:
    return f"<services><service>{body}</service></services>"


FULL_FIELDS = (
    "<name>orders</name>"
    "<db-url-env>ORD_URL</db-url-env>"
    "<db-user-env>ORD_USER</db-user-env>"
    "<db-password-env>ORD_PASS</db-password-env>"
)


def test_valid_document_yields_service_elements() -> None:
    document = validate_document(ORDERS_XML)

    assert len(document.services) == 1
    record = document.services[0].to_record()
    assert record.name == "orders"
    assert record.url_variable == "ORD_URL"
    assert record.user_variable == "ORD_USER"
    assert record.password_variable == "ORD_PASS"


def test_document_without_services_is_accepted() -> None:
    assert validate_document("<services/>").services == ()


def test_field_order_is_free() -> None:
    body = (
        "<db-password-env>P</db-password-env><db-user-env>U_1</db-user-env>"
        "<name>a</name><db-url-env>U_2</db-url-env>"
    )

    document = validate_document(_service(body))

    assert document.services[0].name == "a"


def test_empty_element_is_left_to_field_rules() -> None:
    body = FULL_FIELDS.replace("<name>orders</name>", "<name/>")

    document = validate_document(_service(body))

    assert document.services[0].name == ""


def test_missing_field_names_the_element() -> None:
    body = FULL_FIELDS.replace("<db-url-env>ORD_URL</db-url-env>", "")

    with pytest.raises(SchemaValidationError, match="db-url-env"):
        validate_document(_service(body))


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("<services><service>", "not well-formed"),
        ("", "not well-formed"),
        ("<databases/>", "Expected root element"),
        (_service(FULL_FIELDS + "<name>again</name>"), "Duplicate element <name>"),
        (_service(FULL_FIELDS + "<port>5432</port>"), "Unexpected element <port>"),
        ("<services><other/></services>", "Unexpected element <other>"),
        ("<services>stray<service/></services>", "Unexpected text"),
        (_service(FULL_FIELDS + "trailing"), "Unexpected text"),
        ('<services version="2"/>', "does not accept attributes"),
        (_service(FULL_FIELDS.replace("<name>orders</name>", "<name><b>x</b></name>")), "text only"),
    ],
)
def test_structural_defects_are_rejected(text: str, fragment: str) -> None:
    with pytest.raises(SchemaValidationError, match=fragment):
        validate_document(text)


def test_bytes_are_decoded_with_declared_encoding() -> None:
    text = '<?xml version="1.0" encoding="ISO-8859-1"?>\n' + _service(FULL_FIELDS.replace("orders", "commandé"))

    document = validate_document(text.encode("latin-1"))

    assert document.services[0].name == "commandé"
