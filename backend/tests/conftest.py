"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest

from models.form import FieldSpec, FieldType, FormDefinition


def make_field(field_id: str, field_type: str = "text", **kwargs) -> FieldSpec:
    """Create a FieldSpec with a readable id for testing."""
    defaults = {"label": field_id.replace("_", " ").title()}
    defaults.update(kwargs)
    return FieldSpec(id=field_id, type=FieldType(field_type), **defaults)


@pytest.fixture
def two_page_form():
    """Name on page one, email on page two."""
    return FormDefinition(
        id="form-1",
        title="Sign up",
        elements=[
            make_field("field1", "text", label="Name", required=True),
            make_field("break1", "pagebreak", label="Page Break"),
            make_field("field2", "email", label="Email", required=True),
        ],
    )


@pytest.fixture
def contact_form():
    """Single page contact form with layout elements and a thank-you page."""
    return FormDefinition(
        id="contact-form",
        title="Contact us",
        elements=[
            make_field("intro", "heading", label="Get in touch"),
            make_field("name", "text", label="Full Name", required=True),
            make_field("email", "email", label="Email Address", required=True),
            make_field(
                "topic",
                "select",
                label="Topic",
                options=["Sales", "Support", "Other"],
            ),
            make_field("message", "textarea", label="Message"),
            make_field("thanks", "thankyou", label="Thanks, we'll be in touch"),
        ],
    )


@pytest.fixture
def sample_fields():
    """Five plain text fields a..e."""
    return [make_field(name) for name in ("a", "b", "c", "d", "e")]


@pytest.fixture
def mock_table():
    """Create a mock DynamoDB table."""
    table = Mock()
    table.put_item.return_value = {}
    table.get_item.return_value = {}
    table.query.return_value = {"Items": []}
    table.update_item.return_value = {}
    table.delete_item.return_value = {}
    return table
