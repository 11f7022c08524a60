"""
Tests for the Jinja2 notification template engine.
"""

from datetime import datetime, timezone

import pytest

from garmentsync.domain.enums import StakeholderRole
from garmentsync.services.notifications.templates import (
    TemplateEngine,
    TemplateNotFoundError,
    TemplateRenderError,
)


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


class TestBundledTemplates:
    def test_invitation_renders_all_parts(self, engine):
        rendered = engine.render_email(
            "stakeholder_invitation",
            {
                "name": "Jo",
                "order_id": "PO-1",
                "buyer_name": "Acme",
                "style_number": "AC-1",
                "estimated_delivery": datetime(2025, 3, 5, tzinfo=timezone.utc),
                "role": StakeholderRole.BUYER_EMPLOYEE,
                "permissions": "comment",
                "inviter_name": "Sarah",
                "custom_message": None,
                "order_url": "http://localhost:5000/order/PO-1",
            },
        )

        assert set(rendered) == {"subject", "html_body", "text_body"}
        assert rendered["subject"] == "You've been invited to collaborate on order PO-1"
        assert "March 05, 2025" in rendered["text_body"]
        assert "Buyer Employee" in rendered["text_body"]
        assert "Comment" in rendered["html_body"]

    def test_subject_is_single_line(self, engine):
        rendered = engine.render_email("notification_reply", {"subject": "Re:\n  hello "})

        assert rendered["subject"] == "Re: hello"


class TestTemplateErrors:
    def test_missing_template(self, engine):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            engine.render_email("does_not_exist", {})

        assert exc_info.value.template_name == "does_not_exist"

    def test_render_failure(self, tmp_path):
        (tmp_path / "broken_subject.txt").write_text("{{ value.missing() }}")
        (tmp_path / "broken.html").write_text("")
        (tmp_path / "broken.txt").write_text("")
        engine = TemplateEngine(template_dir=str(tmp_path))

        with pytest.raises(TemplateRenderError):
            engine.render_email("broken", {"value": None})


class TestFilters:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (datetime(2025, 12, 1, tzinfo=timezone.utc), "December 01, 2025"),
            ("2025-01-31T00:00:00Z", "January 31, 2025"),
            ("soon", "soon"),
        ],
    )
    def test_date_filter(self, value, expected):
        assert TemplateEngine._format_date(value) == expected

    def test_label_filter(self):
        assert TemplateEngine._format_label("quality_check") == "Quality Check"
        assert TemplateEngine._format_label(StakeholderRole.FACTORY_OWNER) == "Factory Owner"
