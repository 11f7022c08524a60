"""
Notification template engine with Jinja2 for email rendering.

Each email template is a triple of files in the template directory:
``<name>_subject.txt``, ``<name>.html`` and ``<name>.txt``.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from garmentsync.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent.parent / "templates" / "notifications"


class TemplateEngineError(Exception):
    """Base exception for template engine errors."""

    def __init__(self, message: str, template_name: Optional[str] = None):
        super().__init__(message)
        self.template_name = template_name


class TemplateNotFoundError(TemplateEngineError):
    """Raised when a template cannot be found."""

    pass


class TemplateRenderError(TemplateEngineError):
    """Raised when template rendering fails."""

    pass


class TemplateEngine:
    """
    Template engine for rendering notification emails.

    Subjects are rendered without autoescaping and stripped; HTML bodies are
    autoescaped.
    """

    def __init__(
        self,
        template_dir: Optional[str] = None,
        cache_size: int = 400,
    ):
        """
        Initialize the template engine.

        Args:
            template_dir: Directory containing template files. Defaults to
                         the ``templates/notifications`` package directory.
            cache_size: Size of the template cache.
        """
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            cache_size=cache_size,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self.env.filters["date"] = self._format_date
        self.env.filters["label"] = self._format_label

        logger.debug("Template engine initialized", template_dir=str(self.template_dir))

    def render_email(self, template_name: str, context: Dict[str, Any]) -> Dict[str, str]:
        """
        Render an email template.

        Args:
            template_name: Template base name (without suffix or extension).
            context: Variables to substitute in the template.

        Returns:
            Dictionary containing 'subject', 'html_body' and 'text_body'.

        Raises:
            TemplateNotFoundError: If any of the three files is missing.
            TemplateRenderError: If rendering fails.
        """
        try:
            subject = self._load_template(f"{template_name}_subject.txt").render(**context)
            html_body = self._load_template(f"{template_name}.html").render(**context)
            text_body = self._load_template(f"{template_name}.txt").render(**context)
        except TemplateNotFound as e:
            logger.error(
                "Email template not found",
                template_name=template_name,
                error=str(e),
            )
            raise TemplateNotFoundError(
                f"Email template not found: {template_name}",
                template_name=template_name,
            ) from e
        except TemplateError as e:
            logger.error(
                "Email template rendering failed",
                template_name=template_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TemplateRenderError(
                f"Failed to render email template: {str(e)}",
                template_name=template_name,
            ) from e

        return {
            "subject": " ".join(subject.split()),
            "html_body": html_body,
            "text_body": text_body,
        }

    def _load_template(self, template_path: str) -> Template:
        return self.env.get_template(template_path)

    @staticmethod
    def _format_date(value: Any) -> str:
        """Format a datetime or ISO string as e.g. 'March 05, 2025'."""
        if isinstance(value, datetime):
            return value.strftime("%B %d, %Y")
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
            return dt.strftime("%B %d, %Y")
        except ValueError:
            return str(value)

    @staticmethod
    def _format_label(value: Any) -> str:
        """Turn an enum value such as 'quality_check' into 'Quality Check'."""
        raw = getattr(value, "value", value)
        return str(raw).replace("_", " ").title()


def get_template_engine(template_dir: Optional[str] = None) -> TemplateEngine:
    """
    Factory function to create a template engine instance.

    Args:
        template_dir: Directory containing template files.

    Returns:
        Configured TemplateEngine instance.
    """
    return TemplateEngine(template_dir=template_dir)
