"""Notification email templates and placeholder rendering."""

import enum
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")
CONDITIONAL_PATTERN = re.compile(r"\{\{#if (\w+)\}\}(.*?)\{\{/if\}\}", re.DOTALL)


class TemplateName(str, enum.Enum):
    """Registered notification templates."""
    WELCOME = "welcome"
    TICKET_CREATED = "ticket_created"
    APPOINTMENT_REMINDER = "appointment_reminder"
    WEEKLY_REPORT = "weekly_report"


TEMPLATE_NAMES = frozenset(name.value for name in TemplateName)


@dataclass(frozen=True)
class EmailTemplate:
    """Subject, HTML and plain-text bodies of one template."""

    subject: str
    html_body: str
    text_body: str


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


def render_template(body: str, data: Mapping[str, Any]) -> str:
    """Substitute ``{{name}}`` placeholders and ``{{#if name}}`` blocks.

    A conditional block is kept only when ``name`` has a truthy value.
    Placeholders whose name is not in ``data`` are left as they are.
    """
    def conditional(match: re.Match) -> str:
        return match.group(2) if data.get(match.group(1)) else ""

    def placeholder(match: re.Match) -> str:
        key = match.group(1)
        if key in data and data[key] is not None:
            return str(data[key])
        return match.group(0)

    body = CONDITIONAL_PATTERN.sub(conditional, body)
    return PLACEHOLDER_PATTERN.sub(placeholder, body)


def render_named_template(name: TemplateName, data: Mapping[str, Any]) -> RenderedEmail:
    """Render subject and both bodies of a registered template."""
    template = TEMPLATES[TemplateName(name)]
    return RenderedEmail(
        subject=render_template(template.subject, data),
        html_body=render_template(template.html_body, data),
        text_body=render_template(template.text_body, data),
    )


_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block;"
)
_PANEL_STYLE = "background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0;"
_WRAPPER_STYLE = "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;"

TEMPLATES: Mapping[TemplateName, EmailTemplate] = MappingProxyType({
    TemplateName.WELCOME: EmailTemplate(
        subject="Welcome to CommHub!",
        html_body=f"""
<div style="{_WRAPPER_STYLE}">
  <h1 style="color: #2563eb;">Welcome to CommHub!</h1>
  <p>Hi {{{{name}}}},</p>
  <p>Thank you for joining CommHub - your complete communication tools platform.</p>
  <p>You can now:</p>
  <ul>
    <li>Manage customer support tickets</li>
    <li>Track contacts and deals in CRM</li>
    <li>Schedule appointments and meetings</li>
    <li>View analytics and reports</li>
  </ul>
  <p>Get started by logging into your account:</p>
  <a href="{{{{loginUrl}}}}" style="{_BUTTON_STYLE}">Login to CommHub</a>
  <p>Best regards,<br>The CommHub Team</p>
</div>
""",
        text_body=(
            "Welcome to CommHub!\n\n"
            "Hi {{name}},\n\n"
            "Thank you for joining CommHub - your complete communication tools platform.\n\n"
            "You can now manage customer support tickets, track contacts and deals in CRM, "
            "schedule appointments and meetings, and view analytics and reports.\n\n"
            "Get started by logging into your account: {{loginUrl}}\n\n"
            "Best regards,\nThe CommHub Team"
        ),
    ),
    TemplateName.TICKET_CREATED: EmailTemplate(
        subject="Support Ticket Created - #{{ticketId}}",
        html_body=f"""
<div style="{_WRAPPER_STYLE}">
  <h1 style="color: #2563eb;">Support Ticket Created</h1>
  <p>Hi {{{{customerName}}}},</p>
  <p>Your support ticket has been created successfully.</p>
  <div style="{_PANEL_STYLE}">
    <h3 style="margin: 0 0 8px 0;">Ticket Details</h3>
    <p><strong>Ticket ID:</strong> #{{{{ticketId}}}}</p>
    <p><strong>Subject:</strong> {{{{subject}}}}</p>
    <p><strong>Priority:</strong> {{{{priority}}}}</p>
    <p><strong>Status:</strong> {{{{status}}}}</p>
  </div>
  <p>Our support team will review your ticket and respond as soon as possible.</p>
  <p>You can track the progress of your ticket in your dashboard.</p>
  <p>Best regards,<br>CommHub Support Team</p>
</div>
""",
        text_body=(
            "Support Ticket Created - #{{ticketId}}\n\n"
            "Hi {{customerName}},\n\n"
            "Your support ticket has been created successfully.\n\n"
            "Ticket Details:\n"
            "- Ticket ID: #{{ticketId}}\n"
            "- Subject: {{subject}}\n"
            "- Priority: {{priority}}\n"
            "- Status: {{status}}\n\n"
            "Our support team will review your ticket and respond as soon as possible.\n\n"
            "Best regards,\nCommHub Support Team"
        ),
    ),
    TemplateName.APPOINTMENT_REMINDER: EmailTemplate(
        subject="Appointment Reminder - {{title}}",
        html_body=f"""
<div style="{_WRAPPER_STYLE}">
  <h1 style="color: #2563eb;">Appointment Reminder</h1>
  <p>Hi {{{{attendeeName}}}},</p>
  <p>This is a reminder about your upcoming appointment.</p>
  <div style="{_PANEL_STYLE}">
    <h3 style="margin: 0 0 8px 0;">Appointment Details</h3>
    <p><strong>Title:</strong> {{{{title}}}}</p>
    <p><strong>Date &amp; Time:</strong> {{{{startTime}}}}</p>
    <p><strong>Duration:</strong> {{{{duration}}}}</p>
    <p><strong>Location:</strong> {{{{location}}}}</p>
    {{{{#if meetingLink}}}}<p><strong>Meeting Link:</strong> <a href="{{{{meetingLink}}}}">Join Meeting</a></p>{{{{/if}}}}
  </div>
  <p>{{{{#if description}}}}{{{{description}}}}{{{{/if}}}}</p>
  <p>Please make sure to join on time.</p>
  <p>Best regards,<br>CommHub Team</p>
</div>
""",
        text_body=(
            "Appointment Reminder - {{title}}\n\n"
            "Hi {{attendeeName}},\n\n"
            "This is a reminder about your upcoming appointment.\n\n"
            "Appointment Details:\n"
            "- Title: {{title}}\n"
            "- Date & Time: {{startTime}}\n"
            "- Duration: {{duration}}\n"
            "- Location: {{location}}\n"
            "{{#if meetingLink}}- Meeting Link: {{meetingLink}}\n{{/if}}"
            "{{#if description}}\n{{description}}\n{{/if}}"
            "\nPlease make sure to join on time.\n\n"
            "Best regards,\nCommHub Team"
        ),
    ),
    TemplateName.WEEKLY_REPORT: EmailTemplate(
        subject="Weekly Performance Report",
        html_body=f"""
<div style="{_WRAPPER_STYLE}">
  <h1 style="color: #2563eb;">Weekly Performance Report</h1>
  <p>Hi {{{{userName}}}},</p>
  <p>Here's your weekly performance summary:</p>
  <div style="{_PANEL_STYLE}">
    <h3 style="margin: 0 0 16px 0;">This Week's Highlights</h3>
    <p><strong>Tickets Resolved:</strong> {{{{ticketsResolved}}}}</p>
    <p><strong>New Contacts:</strong> {{{{newContacts}}}}</p>
    <p><strong>Meetings Held:</strong> {{{{meetingsHeld}}}}</p>
    <p><strong>Revenue Generated:</strong> ${{{{revenue}}}}</p>
  </div>
  <p>Keep up the great work!</p>
  <a href="{{{{dashboardUrl}}}}" style="{_BUTTON_STYLE}">View Full Report</a>
  <p>Best regards,<br>CommHub Analytics Team</p>
</div>
""",
        text_body=(
            "Weekly Performance Report\n\n"
            "Hi {{userName}},\n\n"
            "Here's your weekly performance summary:\n\n"
            "This Week's Highlights:\n"
            "- Tickets Resolved: {{ticketsResolved}}\n"
            "- New Contacts: {{newContacts}}\n"
            "- Meetings Held: {{meetingsHeld}}\n"
            "- Revenue Generated: ${{revenue}}\n\n"
            "Keep up the great work!\n\n"
            "View Full Report: {{dashboardUrl}}\n\n"
            "Best regards,\nCommHub Analytics Team"
        ),
    ),
})
