from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..models.config_models import TemplateConfig
from ..models.maintenance_item import MaintenanceItem
from .templating import render_template

"""Notification composition.

Renders the due and overdue lists into one subject line and one plain-text
body. Output depends only on the items and the templates; nothing here reads
the clock.

Body layout::

    <due section>
    <blank line, only when both sections are present>
    <overdue section>
    <footer>
"""

__all__ = [
    "SECTION_SEPARATOR",
    "Notification",
    "build_section",
    "compose",
]

SECTION_SEPARATOR = "-----"


@dataclass(frozen=True)
class Notification:
    subject: str
    body: str
    item_count: int


def build_section(items: Sequence[MaintenanceItem], overdue: bool, templates: TemplateConfig) -> str:
    """Render one status section, or "" when there are no items."""
    if not items:
        return ""
    status = templates.status_labels.overdue if overdue else templates.status_labels.due
    header = render_template(templates.section_header, {"status": status})
    item_list = "\n".join(f"- {item.description} - {item.due_label()}" for item in items)
    return f"{header}\n\n{item_list}\n\n{SECTION_SEPARATOR}\n"


def compose(
    due_items: Sequence[MaintenanceItem],
    overdue_items: Sequence[MaintenanceItem],
    templates: TemplateConfig,
    reference_url: str,
) -> Notification | None:
    """Build the reminder message.

    Returns:
        Notification, or None when both lists are empty (nothing to send;
        the transport must not be invoked)
    """
    count = len(due_items) + len(overdue_items)
    if count == 0:
        return None

    subject = render_template(templates.subject, {"count": count})
    due_section = build_section(due_items, False, templates)
    overdue_section = build_section(overdue_items, True, templates)
    spacer = "\n" if due_section and overdue_section else ""
    footer = render_template(templates.footer, {"url": reference_url})
    body = due_section + spacer + overdue_section + footer
    return Notification(subject=subject, body=body, item_count=count)
