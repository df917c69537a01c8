"""Tests for the HTML submissions table."""

from services.submission_table import EMPTY_PAGE, render_submissions_table


def _record(**overrides) -> dict:
    record = {
        "id": "lq2x8k0",
        "name": "Al",
        "email": "a@b.co",
        "phone": None,
        "deviceModel": "Pixel 7",
        "problemDescription": "Screen cracked badly",
        "priority": "High",
        "image": None,
        "createdAt": "2026-01-20T08:00:00.000+00:00",
    }
    record.update(overrides)
    return record


class TestRenderSubmissionsTable:
    """Test cases for render_submissions_table."""

    def test_empty(self):
        assert render_submissions_table([]) == EMPTY_PAGE

    def test_row_contents(self):
        html = render_submissions_table([_record()])

        assert "<td>Al</td>" in html
        assert "<td>Pixel 7</td>" in html
        assert "<td>High</td>" in html
        assert "<td>2026-01-20 08:00:00 UTC</td>" in html
        assert "&mdash;" in html

    def test_values_are_escaped(self):
        html = render_submissions_table(
            [
                _record(
                    name="<script>alert(1)</script>",
                    problemDescription="a \"b\" & c's",
                )
            ]
        )

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "a &quot;b&quot; &amp; c&#x27;s" in html

    def test_image_link(self):
        html = render_submissions_table([_record(image="/uploads/1_a.png")])

        assert '<a href="/uploads/1_a.png" target="_blank">View</a>' in html

    def test_rows_keep_given_order(self):
        html = render_submissions_table([_record(name="First"), _record(name="Second")])

        assert html.index("First") < html.index("Second")

    def test_unparseable_timestamp_passed_through(self):
        html = render_submissions_table([_record(createdAt="yesterday")])

        assert "<td>yesterday</td>" in html
