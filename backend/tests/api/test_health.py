"""Tests for health check endpoints."""


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_readiness_check(self, client):
        """Readiness endpoint should report the credential store backend."""
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "credential_store": "memory"}

    def test_health_needs_no_auth(self, client):
        response = client.get("/api/health", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 200
