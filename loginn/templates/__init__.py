"""Email templates for Loginn notifications."""

from html import escape
from pathlib import Path
from urllib.parse import urlencode

_TEMPLATES_DIR = Path(__file__).parent


def load_template(name: str) -> str:
    """Load an email template by name.

    Args:
        name: Template name without extension (e.g., "verification_email")

    Returns:
        Template content as string

    Raises:
        FileNotFoundError: If template doesn't exist
    """
    template_path = _TEMPLATES_DIR / f"{name}.html"
    return template_path.read_text(encoding="utf-8")


def build_link(base_url: str, username: str, token: str) -> str:
    """Append username and token query parameters to a base URL."""
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'username': username, 'token': token})}"


def _render(name: str, username: str, service: str, link: str) -> str:
    template = load_template(name)
    template = template.replace("{{USERNAME}}", escape(username))
    template = template.replace("{{SERVICE}}", escape(service))
    template = template.replace("{{LINK}}", escape(link))
    return template


def get_verification_email(
    username: str,
    service: str,
    token: str,
    verify_url: str,
) -> tuple[str, str]:
    """Get the subject and HTML body of a verification email.

    Returns:
        Tuple of (subject, html_body)
    """
    link = build_link(verify_url, username, token)
    body = _render("verification_email", username, service, link)
    return f"Verify your email for {service}.", body


def get_password_reset_email(
    username: str,
    service: str,
    token: str,
    reset_url: str,
) -> tuple[str, str]:
    """Get the subject and HTML body of a password reset email.

    Returns:
        Tuple of (subject, html_body)
    """
    link = build_link(reset_url, username, token)
    body = _render("password_reset_email", username, service, link)
    return f"Change password for {username}.", body
