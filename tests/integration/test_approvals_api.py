import pytest
from fastapi import status
from httpx import AsyncClient

from app.models import ApprovalRequest, MaintenanceRoutine, OperationalReport


async def fetch(session_maker, model, record_id):
    async with session_maker() as s:
        return await s.get(model, record_id)


async def queue_change(client: AsyncClient, headers: dict, kind: str, record_id: int, fields: dict) -> int:
    response = await client.put(
        f"/api/v1/manage-data/{kind}/{record_id}",
        json={"fields": fields},
        headers=headers,
    )
    assert response.status_code == status.HTTP_200_OK
    return response.json()["approval_request_id"]


@pytest.mark.asyncio
class TestApprovalsAPI:
    """Test /api/v1/approvals endpoints"""

    async def test_working_hours_correction_end_to_end(
        self, client: AsyncClient, session_maker, records, headers_for
    ):
        """Inputter corrects 18 -> 20 hours, MMTC planner approves"""
        record_id = records["operational_report"]
        request_id = await queue_change(
            client, headers_for("inputter_shift1"), "operational_report", record_id, {"totalWorking": 20}
        )

        response = await client.get("/api/v1/approvals", headers=headers_for("planner_mmtc"))
        assert response.status_code == status.HTTP_200_OK
        page = response.json()
        assert page["count"] == 1
        assert page["data"][0]["id"] == request_id

        response = await client.put(
            f"/api/v1/approvals/{request_id}",
            json={"status": "APPROVED"},
            headers=headers_for("planner_mmtc"),
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "APPROVED"
        assert response.json()["old_data"] == {"totalWorking": 18.0}

        report = await fetch(session_maker, OperationalReport, record_id)
        assert report.total_working == 20

        response = await client.put(
            f"/api/v1/approvals/{request_id}",
            json={"status": "REJECTED"},
            headers=headers_for("admin"),
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_working_hours_correction_rejected(
        self, client: AsyncClient, session_maker, records, headers_for
    ):
        record_id = records["operational_report"]
        request_id = await queue_change(
            client, headers_for("inputter_shift1"), "operational_report", record_id, {"totalWorking": 20}
        )

        response = await client.put(
            f"/api/v1/approvals/{request_id}",
            json={"status": "REJECTED"},
            headers=headers_for("planner_mmtc"),
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "REJECTED"

        report = await fetch(session_maker, OperationalReport, record_id)
        assert report.total_working == 18

    async def test_invalid_decision(self, client: AsyncClient, records, headers_for):
        request_id = await queue_change(
            client, headers_for("inputter_shift1"), "operational_report",
            records["operational_report"], {"totalWorking": 20}
        )
        response = await client.put(
            f"/api/v1/approvals/{request_id}",
            json={"status": "PENDING"},
            headers=headers_for("planner_mmtc"),
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_planner_schedule_change_escalates_to_admin(
        self, client: AsyncClient, session_maker, records, headers_for
    ):
        record_id = records["maintenance_routine"]
        response = await client.post(
            "/api/v1/approvals",
            json={
                "request_type": "maintenance_schedule_change",
                "entity_kind": "maintenance_routine",
                "record_id": record_id,
                "new_data": {"endDate": "2025-07-25"},
                "reason": "Parts delayed",
            },
            headers=headers_for("planner_mmtc"),
        )
        assert response.status_code == status.HTTP_201_CREATED
        created = response.json()
        assert created["status"] == "PENDING_ADMIN_APPROVAL"
        assert created["old_data"] == {"endDate": None}
        assert "department_id" not in created["new_data"]

        response = await client.put(
            f"/api/v1/approvals/{created['id']}",
            json={"status": "APPROVED"},
            headers=headers_for("planner_hetu"),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = await client.get("/api/v1/approvals", headers=headers_for("planner_hetu"))
        assert response.json()["count"] == 0

        response = await client.put(
            f"/api/v1/approvals/{created['id']}",
            json={"status": "APPROVED"},
            headers=headers_for("admin"),
        )
        assert response.status_code == status.HTTP_200_OK

        routine = await fetch(session_maker, MaintenanceRoutine, record_id)
        assert routine.end_date.isoformat() == "2025-07-25"

    async def test_queue_is_planner_or_admin_only(self, client: AsyncClient, headers_for, records):
        response = await client.get("/api/v1/approvals", headers=headers_for("inputter_shift1"))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_admin_filters(self, client: AsyncClient, records, headers_for):
        inputter = headers_for("inputter_shift1")
        first = await queue_change(client, inputter, "operational_report", records["operational_report"], {"notes": "a"})
        await queue_change(client, inputter, "energy_consumption", records["energy_consumption"], {"pabrikConsumption": 1})
        await client.put(f"/api/v1/approvals/{first}", json={"status": "REJECTED"}, headers=headers_for("admin"))

        response = await client.get(
            "/api/v1/approvals", params={"status": "PENDING"}, headers=headers_for("admin")
        )
        page = response.json()
        assert page["count"] == 1
        assert page["data"][0]["entity_kind"] == "energy_consumption"

        response = await client.get(
            "/api/v1/approvals", params={"page_index": 2, "page_size": 1}, headers=headers_for("admin")
        )
        page = response.json()
        assert page["page_index"] == 2
        assert page["count"] == 2
        assert len(page["data"]) == 1

    async def test_get_mine_and_stats(self, client: AsyncClient, records, headers_for):
        inputter = headers_for("inputter_shift1")
        request_id = await queue_change(
            client, inputter, "critical_issue", records["critical_issue"], {"status": "SELESAI"}
        )

        response = await client.get(f"/api/v1/approvals/{request_id}", headers=inputter)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["new_data"] == {"status": "SELESAI"}

        response = await client.get(f"/api/v1/approvals/{request_id}", headers=headers_for("planner_hetu"))
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = await client.get("/api/v1/approvals/mine", headers=inputter)
        assert [r["id"] for r in response.json()] == [request_id]

        response = await client.get("/api/v1/approvals/stats", headers=headers_for("planner_pmtc"))
        assert response.json() == {
            "total": 1, "pending": 1, "pending_admin": 0, "approved": 0, "rejected": 0
        }

        response = await client.get("/api/v1/approvals/999", headers=headers_for("admin"))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_deletion_request(self, client: AsyncClient, session_maker, records, headers_for):
        record_id = records["operational_report"]
        response = await client.post(
            "/api/v1/approvals",
            json={
                "request_type": "data_deletion",
                "entity_kind": "operational_report",
                "record_id": record_id,
                "reason": "Entered for the wrong unit",
            },
            headers=headers_for("inputter_shift1"),
        )
        assert response.status_code == status.HTTP_201_CREATED
        created = response.json()
        assert created["new_data"] is None
        assert created["old_data"]["totalWorking"] == 18.0

        response = await client.put(
            f"/api/v1/approvals/{created['id']}",
            json={"status": "APPROVED"},
            headers=headers_for("planner_mmtc"),
        )
        assert response.status_code == status.HTTP_200_OK
        assert await fetch(session_maker, OperationalReport, record_id) is None

        request = await fetch(session_maker, ApprovalRequest, created["id"])
        assert request.old_data["totalWorking"] == 18.0


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert "status" in response.json()
    assert "X-Process-Time" in response.headers
