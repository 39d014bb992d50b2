"""Integration tests for the report endpoint over the fixture store."""

import re

import pytest

from commhub.api.deps import get_data_source
from commhub.core.exceptions import DataSourceError
from commhub.services.data_source import DataSource, SQLAlchemyDataSource

REPORT_URL = "/functions/v1/generate-report"
JANUARY = {
    "type": "custom",
    "startDate": "2025-01-01T00:00:00Z",
    "endDate": "2025-01-31T23:59:59Z",
}


class FailingDataSource(DataSource):
    """Delegates to the store except for one entity, which fails."""

    def __init__(self, delegate: DataSource, entity: str):
        self.delegate = delegate
        self.entity = entity

    def fetch(self, query):
        if query.entity == self.entity:
            raise DataSourceError(query.entity, "connection reset by peer")
        return self.delegate.fetch(query)


class TestGenerateReportJson:
    """Test JSON output."""

    def test_january_report(self, client, crm_data):
        response = client.post(REPORT_URL, json=JANUARY)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        data = response.json()

        assert data["meta"]["type"] == "custom"
        assert data["meta"]["startDate"] == "2025-01-01T00:00:00Z"
        assert data["meta"]["endDate"] == "2025-01-31T23:59:59Z"
        assert data["meta"]["userId"] is None
        assert data["summary"] == {
            "totalTickets": 3,
            "resolvedTickets": 2,
            "newContacts": 2,
            "totalRevenue": 0,
            "appointmentsHeld": 1,
        }
        assert data["tickets"]["byStatus"] == {"resolved": 2, "open": 1}
        assert data["deals"]["conversionRate"] == 0
        assert data["appointments"]["completionRate"] == 50
        assert "note" not in data

    def test_ticket_details_embed_names(self, client, crm_data):
        details = client.post(REPORT_URL, json=JANUARY).json()["tickets"]["details"]

        assert [t["id"] for t in details] == ["t-1", "t-2", "t-3"]
        assert details[0]["customer"]["name"] == "Alice"
        assert details[0]["assignedTo"]["name"] == "Bob"
        assert details[2]["assignedTo"] is None
        assert details[0]["created_at"] == "2025-01-05T09:00:00Z"

    def test_scoped_to_user(self, client, crm_data):
        data = client.post(REPORT_URL, json={**JANUARY, "userId": "p-bob"}).json()

        assert data["meta"]["userId"] == "p-bob"
        # Bob is only ever the assignee
        assert [t["id"] for t in data["tickets"]["details"]] == ["t-1", "t-2"]
        assert data["summary"]["newContacts"] == 1
        assert data["appointments"]["total"] == 2

    def test_weekly_window_is_seven_days(self, client, crm_data):
        meta = client.post(REPORT_URL, json={"type": "weekly"}).json()["meta"]

        assert meta["startDate"] is not None
        assert meta["endDate"] is not None
        assert meta["startDate"] < meta["endDate"]

    def test_custom_without_bounds_covers_everything(self, client, crm_data):
        data = client.post(REPORT_URL, json={"type": "custom"}).json()

        assert data["meta"]["startDate"] is None
        assert data["summary"]["totalTickets"] == 4


class TestGenerateReportCsv:
    """Test tabular output."""

    def test_january_csv(self, client, crm_data):
        response = client.post(REPORT_URL, json={**JANUARY, "format": "csv"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert re.fullmatch(
            r'attachment; filename="report-custom-\d+\.csv"',
            response.headers["content-disposition"],
        )

        lines = response.text.split("\n")
        assert "Total Tickets,3" in lines
        assert "Resolved Tickets,2" in lines
        assert "New Contacts,2" in lines
        assert "Total Revenue,$0" in lines
        assert "Appointments Held,1" in lines
        assert lines[-3:] == [
            "t-1,Login broken,resolved,high,2025-01-05T09:00:00Z,Alice,Bob",
            "t-2,Billing question,resolved,low,2025-01-10T09:00:00Z,Carol,Bob",
            "t-3,Feature request,open,medium,2025-01-20T09:00:00Z,Alice,",
        ]


class TestGenerateReportPdf:
    """Test the unavailable document output."""

    def test_pdf_returns_json_with_note(self, client, crm_data):
        response = client.post(REPORT_URL, json={**JANUARY, "format": "pdf"})

        assert response.status_code == 200
        data = response.json()
        assert data["note"] == "PDF generation not implemented in demo. Use JSON or CSV format."
        assert data["summary"]["totalTickets"] == 3


class TestGenerateReportErrors:
    """Test failure handling."""

    def test_entity_failure_fails_whole_report(self, client, crm_data, session_factory):
        client.app.dependency_overrides[get_data_source] = lambda: FailingDataSource(
            SQLAlchemyDataSource(session_factory), "appointments"
        )

        response = client.post(REPORT_URL, json=JANUARY)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load appointments: connection reset by peer"}
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.parametrize("payload", [
        {},
        {"type": "yearly"},
        {"type": "custom", "format": "xlsx"},
        {"type": "custom", "startDate": "not-a-date"},
    ])
    def test_invalid_request(self, client, payload):
        response = client.post(REPORT_URL, json=payload)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Validation error:")
