"""API integration tests for distribution, customer and report endpoints"""

import os
from decimal import Decimal

import pytest

from src.domain.package import PackageStatus


class TestDistributeEndpoint:
    """POST /api/distributions"""

    @pytest.mark.asyncio
    async def test_settles_and_writes_receipt(self, client, seed_account, seed_package):
        """
        Given: A customer with a ready package
        When: The package is settled with overpayment
        Then: 201 with balances, three transactions and a stored receipt
        """
        # Arrange
        await seed_account(7, "875.00")
        package = await seed_package(7, freight_price="100.00")

        # Act
        response = await client.post(
            "/api/distributions",
            json={"package_ids": [package.id], "cash_tendered": "150.00", "performed_by": 3},
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["payment_status"] == "paid"
        assert Decimal(data["account_balance"]) == Decimal("875.00")
        assert Decimal(data["credit_balance"]) == Decimal("50.00")
        assert [t["transaction_type"] for t in data["transactions"]] == ["charge", "payment", "credit"]
        assert data["side_effect_failures"] == []
        assert data["receipt_path"].endswith(f"{data['receipt_number']}.pdf")
        assert os.path.exists(data["receipt_path"])

    @pytest.mark.asyncio
    async def test_use_account_flag_is_accepted(self, client, seed_account, seed_package):
        await seed_account(7, "875.00")
        package = await seed_package(7, freight_price="100.00")

        response = await client.post(
            "/api/distributions",
            json={
                "package_ids": [package.id],
                "cash_tendered": "50.00",
                "performed_by": 3,
                "use_account": True,
            },
        )

        assert response.status_code == 201
        assert Decimal(response.json()["account_balance"]) == Decimal("825.00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"package_ids": [], "cash_tendered": "10.00", "performed_by": 3},
            {"package_ids": [1], "cash_tendered": "-1.00", "performed_by": 3},
            {"package_ids": [1, 1], "cash_tendered": "10.00", "performed_by": 3},
            {"package_ids": [1], "cash_tendered": "10.001", "performed_by": 3},
            {"package_ids": [1], "performed_by": 3},
        ],
    )
    async def test_malformed_request(self, client, body):
        response = await client.post("/api/distributions", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_write_off_above_total(self, client, seed_account, seed_package):
        await seed_account(7)
        package = await seed_package(7, freight_price="100.00")

        response = await client.post(
            "/api/distributions",
            json={"package_ids": [package.id], "cash_tendered": "0", "performed_by": 3, "write_off": "120.00"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_unknown_customer_account(self, client, seed_package):
        package = await seed_package(8, freight_price="100.00")

        response = await client.post(
            "/api/distributions",
            json={"package_ids": [package.id], "cash_tendered": "100.00", "performed_by": 3},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CUSTOMER_ACCOUNT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_package_not_ready(self, client, seed_account, seed_package):
        await seed_account(7)
        package = await seed_package(7, freight_price="100.00", status=PackageStatus.CUSTOMS)

        response = await client.post(
            "/api/distributions",
            json={"package_ids": [package.id], "cash_tendered": "100.00", "performed_by": 3},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INELIGIBLE_PACKAGE"


class TestReadEndpoints:
    @pytest.mark.asyncio
    async def test_distribution_detail(self, client, seed_account, seed_package):
        await seed_account(7, "875.00")
        package = await seed_package(7, freight_price="100.00")
        created = (await client.post(
            "/api/distributions",
            json={"package_ids": [package.id], "cash_tendered": "100.00", "performed_by": 3},
        )).json()

        response = await client.get(f"/api/distributions/{created['distribution_id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["receipt_number"] == created["receipt_number"]
        assert [item["package_id"] for item in data["items"]] == [package.id]
        assert len(data["transactions"]) == 2

    @pytest.mark.asyncio
    async def test_distribution_not_found(self, client):
        response = await client.get("/api/distributions/999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DISTRIBUTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_balance(self, client, seed_account):
        await seed_account(7, "-25.00", "10.00")

        response = await client.get("/api/customers/7/balance")

        assert response.status_code == 200
        assert Decimal(response.json()["account_balance"]) == Decimal("-25.00")
        assert Decimal(response.json()["credit_balance"]) == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_balance_unknown_customer(self, client):
        response = await client.get("/api/customers/404/balance")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_ready_packages_and_history(self, client, seed_account, seed_package):
        """
        Given: Two ready packages
        When: One is settled
        Then: Only the other is still listed as ready; history and statement
              show the settlement
        """
        # Arrange
        await seed_account(7)
        first = await seed_package(7, freight_price="40.00", tracking_number="A")
        await seed_package(7, freight_price="15.00", tracking_number="B")

        # Act
        await client.post(
            "/api/distributions",
            json={"package_ids": [first.id], "cash_tendered": "40.00", "performed_by": 3},
        )
        ready = (await client.get("/api/customers/7/packages/ready")).json()
        history = (await client.get("/api/customers/7/distributions")).json()
        statement = (await client.get("/api/customers/7/transactions?limit=1")).json()

        # Assert
        assert [p["tracking_number"] for p in ready["packages"]] == ["B"]
        assert Decimal(ready["total_amount"]) == Decimal("15.00")
        assert history["total"] == 1
        assert statement["total"] == 2
        assert len(statement["transactions"]) == 1

    @pytest.mark.asyncio
    async def test_invalid_pagination(self, client, seed_account):
        await seed_account(7)

        response = await client.get("/api/customers/7/transactions?limit=500")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PAGINATION"


class TestRevenueReport:
    @pytest.mark.asyncio
    async def test_revenue_excludes_overpayment(self, client, seed_account, seed_package):
        await seed_account(7)
        package = await seed_package(7, freight_price="100.00")
        await client.post(
            "/api/distributions",
            json={
                "package_ids": [package.id],
                "cash_tendered": "150.00",
                "performed_by": 3,
                "write_off": "20.00",
            },
        )

        response = await client.get(
            "/api/reports/revenue",
            params={"start": "2000-01-01T00:00:00", "end": "2100-01-01T00:00:00"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["distribution_count"] == 1
        assert Decimal(data["revenue"]) == Decimal("80.00")
        assert Decimal(data["amount_collected"]) == Decimal("150.00")

    @pytest.mark.asyncio
    async def test_inverted_period(self, client):
        response = await client.get(
            "/api/reports/revenue",
            params={"start": "2024-02-01T00:00:00", "end": "2024-01-01T00:00:00"},
        )

        assert response.status_code == 400


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
