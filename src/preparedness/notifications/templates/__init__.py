"""Template registry — maps request transitions to template classes.

Each template knows who reads it (owner or requester), its notification type
and how to render a title and content from the transition context.
"""

from preparedness.notifications.templates.request_approved import RequestApprovedTemplate
from preparedness.notifications.templates.request_cancelled import RequestCancelledTemplate
from preparedness.notifications.templates.request_completed import RequestCompletedTemplate
from preparedness.notifications.templates.request_denied import RequestDeniedTemplate
from preparedness.notifications.templates.request_displaced import RequestDisplacedTemplate
from preparedness.notifications.templates.request_handed_over import RequestHandedOverTemplate
from preparedness.notifications.templates.request_submitted import RequestSubmittedTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    "request_submitted": RequestSubmittedTemplate,
    "request_approved": RequestApprovedTemplate,
    "request_denied": RequestDeniedTemplate,
    "request_displaced": RequestDisplacedTemplate,
    "request_completed": RequestCompletedTemplate,
    "request_handed_over": RequestHandedOverTemplate,
    "request_cancelled": RequestCancelledTemplate,
}


def get_template(template_key: str):
    """Look up a template class by its transition key."""
    template_cls = TEMPLATE_REGISTRY.get(template_key)
    if template_cls is None:
        raise ValueError(f"No template registered for transition: {template_key}")
    return template_cls
