"""Built-in form templates."""

from ulid import ULID

from models.form import FieldSpec, FormDefinition
from utils.constants import DEFAULT_FORM_STYLE

from .field_factory import new_field_id

FORM_TEMPLATES: dict[str, dict] = {
    "contact": {
        "name": "Contact Form",
        "description": "Basic contact form with name, email, and message fields",
        "elements": [
            {"type": "text", "label": "Full Name", "required": True},
            {"type": "email", "label": "Email Address", "required": True},
            {"type": "textarea", "label": "Message", "required": True},
        ],
    },
    "feedback": {
        "name": "Customer Feedback",
        "description": "Collect detailed feedback about your product or service",
        "elements": [
            {"type": "text", "label": "Name", "required": True},
            {"type": "email", "label": "Email", "required": True},
            {
                "type": "select",
                "label": "Rating",
                "required": True,
                "options": ["Excellent", "Good", "Fair", "Poor"],
            },
            {"type": "textarea", "label": "What could we improve?", "required": False},
        ],
    },
    "event": {
        "name": "Event Registration",
        "description": "Collect registrations for your upcoming event",
        "elements": [
            {"type": "text", "label": "Attendee Name", "required": True},
            {"type": "email", "label": "Email Address", "required": True},
            {
                "type": "select",
                "label": "Ticket Type",
                "required": True,
                "options": ["Standard", "VIP", "Group"],
            },
            {"type": "textarea", "label": "Special Requirements", "required": False},
        ],
    },
}


class TemplateNotFoundError(KeyError):
    """No template is registered under the requested id."""


def list_templates() -> list[dict[str, str]]:
    """List available templates as id, name and description."""
    return [
        {"id": template_id, "name": t["name"], "description": t["description"]}
        for template_id, t in FORM_TEMPLATES.items()
    ]


def create_form_from_template(
    template_id: str, user_id: str | None = None, form_id: str | None = None
) -> FormDefinition:
    """Create a new form definition from a built-in template.

    Every element gets a fresh id so forms created from the same template
    never share field ids.

    Raises:
        TemplateNotFoundError: If template_id is unknown
    """
    template = FORM_TEMPLATES.get(template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)

    elements = [
        FieldSpec(id=new_field_id(), **element) for element in template["elements"]
    ]
    return FormDefinition(
        id=form_id or str(ULID()),
        title=template["name"],
        description=template["description"],
        elements=elements,
        style=dict(DEFAULT_FORM_STYLE),
        user_id=user_id,
    )
