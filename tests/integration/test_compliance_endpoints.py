"""
Integration tests for the compliance API endpoints.

Tests the full HTTP request/response cycle against the ASGI app.
"""

import pytest

API_PREFIX = "/api/v1/compliance"


# =============================================================================
# Standards
# =============================================================================


class TestStandardsEndpoint:
    @pytest.mark.asyncio
    async def test_lists_catalog(self, client):
        response = await client.get(f"{API_PREFIX}/standards")

        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data] == ["general", "bittorrent", "xml-tdr", "security", "ai"]

        bittorrent = data[1]
        assert bittorrent["kind"] == "rules"
        assert "critical-connection-established" in bittorrent["rule_ids"]
        assert data[-1]["kind"] == "summary"
        assert data[-1]["rule_ids"] == []


# =============================================================================
# Evaluate
# =============================================================================


class TestEvaluateEndpoint:
    @pytest.mark.asyncio
    async def test_evaluate_general(self, client, details_log):
        response = await client.post(
            f"{API_PREFIX}/evaluate",
            json={"standard_id": "general", "content": details_log},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["standard_id"] == "general"
        assert len(data["outcomes"]) == 6
        assert {o["status"] for o in data["outcomes"]} == {"compliant"}

    @pytest.mark.asyncio
    async def test_evaluate_with_auxiliary_content(self, client, details_log):
        netstat = "\n".join(
            ["tcp 0 0 a b ESTABLISHED"] * 7 + ["tcp 0 0 a b CLOSE_WAIT"] * 15
        )
        response = await client.post(
            f"{API_PREFIX}/evaluate",
            json={
                "standard_id": "security",
                "content": details_log,
                "auxiliary_content": netstat,
            },
        )

        assert response.status_code == 200
        churn = next(
            o for o in response.json()["outcomes"] if o["rule_id"] == "rapid-peer-churn"
        )
        assert churn["status"] == "non-compliant"
        assert churn["finding_count"] == 2
        assert churn["findings"][0].startswith("Unstable network state detected.")

    @pytest.mark.asyncio
    async def test_evaluate_xml_report(self, client, tdr_xml):
        response = await client.post(
            f"{API_PREFIX}/evaluate",
            json={"standard_id": "xml-tdr", "content": tdr_xml},
        )

        assert response.status_code == 200
        timestamps = response.json()["outcomes"][0]
        assert timestamps["rule_id"] == "xml-timestamps-valid"
        assert timestamps["findings"][-1] == "Calculated duration: 5.500 seconds"

    @pytest.mark.asyncio
    async def test_unknown_standard(self, client):
        response = await client.post(
            f"{API_PREFIX}/evaluate",
            json={"standard_id": "nope", "content": "x"},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Standard 'nope' not found"

    @pytest.mark.asyncio
    async def test_summary_standard_is_rejected(self, client):
        response = await client.post(
            f"{API_PREFIX}/evaluate",
            json={"standard_id": "ai", "content": "x"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_content(self, client):
        response = await client.post(
            f"{API_PREFIX}/evaluate", json={"standard_id": "general"}
        )
        assert response.status_code == 422


# =============================================================================
# Summarize
# =============================================================================


class TestSummarizeEndpoint:
    @pytest.mark.asyncio
    async def test_summarize(self, client, fake_provider):
        response = await client.post(
            f"{API_PREFIX}/summarize", json={"content": "ERROR: disk full"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "errors": ["disk full"],
            "warnings": ["slow tracker"],
            "incomplete_transactions": ["piece 4 never verified"],
        }
        fake_provider.invoke.assert_awaited_once()


# =============================================================================
# Batch
# =============================================================================


class TestBatchEndpoint:
    @pytest.mark.asyncio
    async def test_batch(self, client, details_log, tdr_xml, netstat_stable):
        response = await client.post(
            f"{API_PREFIX}/batch",
            json={
                "file_sets": [
                    {
                        "id": "run1",
                        "details": {"name": "details.txt", "content": details_log},
                        "xml": {"name": "downloadstatus.xml", "content": tdr_xml},
                        "netstat": {"name": "netstat.txt", "content": netstat_stable},
                    },
                    {
                        "id": "run2",
                        "details": {"name": "details.txt", "content": details_log},
                    },
                ]
            },
            headers={"X-Request-ID": "batch-req-1"},
        )

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "batch-req-1"

        data = response.json()
        assert data["batch_id"] == "batch-req-1"
        assert set(data["results"]) == {
            "run1/details.txt",
            "run1/downloadstatus.xml",
            "run2/details.txt",
        }
        assert data["results"]["run2/details.txt"]["ai"]["summary"]["errors"] == [
            "disk full"
        ]
        # netstat is only ever an auxiliary document
        assert "run1/netstat.txt" not in data["documents"]
        assert data["results"]["run1/downloadstatus.xml"]["xml-tdr"]["outcomes"][0][
            "status"
        ] == "compliant"

    @pytest.mark.asyncio
    async def test_empty_batch_rejected(self, client):
        response = await client.post(f"{API_PREFIX}/batch", json={"file_sets": []})
        assert response.status_code == 422


# =============================================================================
# Health and middleware
# =============================================================================


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["fastAPI server"] == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client):
        response = await client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 36
