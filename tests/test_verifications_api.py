# =============================================================================
# tests/test_verifications_api.py - Verification Endpoint Tests
# =============================================================================
# Integration tests for /api/v1/verifications through the full middleware
# stack (validation, serialization, error handlers).
# =============================================================================

BASE = "/api/v1/verifications"


# =============================================================================
# Create / Read
# =============================================================================

class TestCreateVerification:

    def test_create_returns_201_without_value(self, client, sample_verification_payload):
        # Act
        response = client.post(BASE, json=sample_verification_payload)

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["identifier"] == "user@example.com"
        assert data["expired"] is False
        assert "value" not in data
        assert data["id"]

    def test_unknown_field_is_422(self, client, sample_verification_payload):
        payload = {**sample_verification_payload, "isAdmin": True}

        response = client.post(BASE, json=payload)

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert any(error["type"] == "extra_forbidden" for error in data["errors"])

    def test_missing_field_is_422(self, client):
        response = client.post(BASE, json={"identifier": "user@example.com"})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_get_by_id(self, client, sample_verification_payload):
        created = client.post(BASE, json=sample_verification_payload).json()

        response = client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert "value" not in response.json()

    def test_get_unknown_is_404(self, client):
        response = client.get(f"{BASE}/does-not-exist")

        assert response.status_code == 404
        assert response.json()["code"] == "VERIFICATION_NOT_FOUND"

    def test_list_filters_by_identifier(self, client, sample_verification_payload):
        client.post(BASE, json=sample_verification_payload)
        client.post(BASE, json={**sample_verification_payload, "identifier": "other@example.com"})

        response = client.get(BASE, params={"identifier": "other@example.com"})

        assert response.status_code == 200
        items = response.json()
        assert len(items) == 1
        assert items[0]["identifier"] == "other@example.com"


# =============================================================================
# Update / Delete
# =============================================================================

class TestModifyVerification:

    def test_patch_expiry(self, client, sample_verification_payload):
        created = client.post(BASE, json=sample_verification_payload).json()

        response = client.patch(
            f"{BASE}/{created['id']}",
            json={"expires_at": "2000-01-01T00:00:00Z"},
        )

        assert response.status_code == 200
        assert response.json()["expired"] is True

    def test_patch_cannot_change_identifier(self, client, sample_verification_payload):
        created = client.post(BASE, json=sample_verification_payload).json()

        response = client.patch(f"{BASE}/{created['id']}", json={"identifier": "x@y.z"})

        assert response.status_code == 422

    def test_delete(self, client, sample_verification_payload):
        created = client.post(BASE, json=sample_verification_payload).json()

        response = client.delete(f"{BASE}/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"{BASE}/{created['id']}").status_code == 404


# =============================================================================
# Check
# =============================================================================

class TestCheckVerification:

    def test_check_consumes_by_default(self, client, sample_verification_payload):
        client.post(BASE, json=sample_verification_payload)
        body = {
            "identifier": sample_verification_payload["identifier"],
            "value": sample_verification_payload["value"],
        }

        first = client.post(f"{BASE}/check", json=body)
        second = client.post(f"{BASE}/check", json=body)

        assert first.json()["valid"] is True
        assert first.json()["consumed"] is True
        assert "value" not in first.json()["verification"]
        assert second.json()["valid"] is False

    def test_check_without_consume_keeps_record(self, client, sample_verification_payload):
        client.post(BASE, json=sample_verification_payload)
        body = {
            "identifier": sample_verification_payload["identifier"],
            "value": sample_verification_payload["value"],
            "consume": False,
        }

        first = client.post(f"{BASE}/check", json=body)
        second = client.post(f"{BASE}/check", json=body)

        assert first.json()["valid"] is True
        assert first.json()["consumed"] is False
        assert second.json()["valid"] is True

    def test_wrong_value_is_invalid(self, client, sample_verification_payload):
        client.post(BASE, json=sample_verification_payload)

        response = client.post(
            f"{BASE}/check",
            json={"identifier": sample_verification_payload["identifier"], "value": "wrong"},
        )

        assert response.status_code == 200
        assert response.json() == {"valid": False, "consumed": False, "verification": None}

    def test_expired_record_is_invalid(self, client, sample_verification_payload):
        created = client.post(BASE, json=sample_verification_payload).json()
        client.patch(f"{BASE}/{created['id']}", json={"expires_at": "2000-01-01T00:00:00Z"})

        response = client.post(
            f"{BASE}/check",
            json={
                "identifier": sample_verification_payload["identifier"],
                "value": sample_verification_payload["value"],
            },
        )

        assert response.json()["valid"] is False


# =============================================================================
# Worker Mode
# =============================================================================

class TestWorkerMode:

    def test_verifications_not_served(self, worker_client, sample_verification_payload):
        response = worker_client.post(BASE, json=sample_verification_payload)
        assert response.status_code == 404

    def test_health_reports_worker_role(self, worker_client):
        response = worker_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["role"] == "worker"

    def test_health_reports_main_role(self, client):
        assert client.get("/api/v1/health").json()["role"] == "main"
