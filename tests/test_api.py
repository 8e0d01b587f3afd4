"""
API endpoint tests for health and public endpoints
"""
import pytest

from app.modules.employees.services import EmployeeService, DEFAULT_EMPLOYEES


class TestHealthEndpoints:
    """Tests for health check endpoints"""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_health_check(self, client):
        """Test health check endpoint"""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_root_endpoint(self, client):
        """Test root endpoint"""
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "EF Portal" in data["message"]


class TestAuthRequired:
    """Tests that verify auth is required"""

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [
        ("get", "/api/user"),
        ("get", "/api/user/loans"),
        ("post", "/api/user/take-loan"),
        ("post", "/api/user/change-password"),
        ("get", "/api/cards"),
    ])
    async def test_protected_endpoints(self, client, method, path):
        response = await getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["success"] is False


class TestEmployees:
    """Tests for the public staff directory"""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_session):
        assert await EmployeeService.seed_defaults(db_session) == len(DEFAULT_EMPLOYEES)
        assert await EmployeeService.seed_defaults(db_session) == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_list_employees(self, client, db_session):
        await EmployeeService.seed_defaults(db_session)

        response = await client.get("/api/employees")

        assert response.status_code == 200
        employees = response.json()["employees"]
        assert [e["name"] for e in employees] == [e["name"] for e in DEFAULT_EMPLOYEES]
        assert set(employees[0]) == {"id", "name", "role", "email"}
