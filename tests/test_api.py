"""
API tests through FastAPI's TestClient with an in-memory database.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from conftest import auth_headers, first_of_previous_month
from models import PaymentCategory, PaymentStatus, UserRole
from services.ledger_store import LedgerStore


def _tenant_with_login(seed, prop, **lease):
    user = seed.user(UserRole.TENANT.value, "Tenant")
    tenant = seed.tenant(prop, user=user, **lease)
    return user, tenant


class TestAuth:
    def test_missing_token(self, client, seed, prop):
        tenant = seed.tenant(prop)
        assert client.get(f"/api/tenants/{tenant.id}/dues").status_code == 401

    def test_bad_token(self, client, seed, prop):
        tenant = seed.tenant(prop)
        response = client.get(f"/api/tenants/{tenant.id}/dues", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 403

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}


class TestTenantDues:
    def test_tenant_view_reconciles(self, client, seed, prop, db):
        user, tenant = _tenant_with_login(
            seed, prop, monthly_rent="10000", lease_start_date=first_of_previous_month(date.today()),
        )

        response = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert body["months_stayed"] == 2
        assert Decimal(str(body["dues"]["total_remaining"])) == Decimal("20000")
        assert body["payment_status"] == "overdue"
        assert body["reconciled"] is True

        profile = client.get(f"/api/tenants/{tenant.id}", headers=auth_headers(user)).json()
        assert profile["payment_status"] == "overdue"

    def test_payment_brings_tenant_up_to_date(self, client, seed, prop, owner):
        user, tenant = _tenant_with_login(
            seed, prop, monthly_rent="10000", lease_start_date=first_of_previous_month(date.today()),
        )
        client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(user))

        created = client.post(
            "/api/payments/manual",
            json={"tenant_id": tenant.id, "category": "Rent", "amount": "20000", "reference": "CASH-001"},
            headers=auth_headers(owner),
        )
        assert created.status_code == 201
        assert created.json()["status"] == "completed"

        body = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(user)).json()
        assert body["payment_status"] == "up-to-date"
        assert Decimal(str(body["dues"]["total_remaining"])) == 0

    def test_owner_view_is_read_only(self, client, seed, prop, owner):
        tenant = seed.tenant(prop, lease_start_date=first_of_previous_month(date.today()))

        body = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(owner)).json()

        assert body["reconciled"] is False
        assert body["payment_status"] == "overdue"
        profile = client.get(f"/api/tenants/{tenant.id}", headers=auth_headers(owner)).json()
        assert profile["payment_status"] == "unknown"

    def test_owner_check_dues_reconciles(self, client, seed, prop, owner):
        tenant = seed.tenant(prop, lease_start_date=first_of_previous_month(date.today()))

        body = client.post(f"/api/tenants/{tenant.id}/check-dues", headers=auth_headers(owner)).json()

        assert body["reconciled"] is True
        profile = client.get(f"/api/tenants/{tenant.id}", headers=auth_headers(owner)).json()
        assert profile["payment_status"] == "overdue"

    def test_tenant_cannot_see_other_tenant(self, client, seed, prop):
        user, _ = _tenant_with_login(seed, prop)
        other = seed.tenant(prop)
        response = client.get(f"/api/tenants/{other.id}/dues", headers=auth_headers(user))
        assert response.status_code == 403

    def test_other_owner_forbidden(self, client, seed, prop):
        stranger = seed.user(UserRole.PROPERTY_OWNER.value, "Stranger")
        tenant = seed.tenant(prop)
        response = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(stranger))
        assert response.status_code == 403

    def test_admin_unknown_tenant_is_404(self, client, seed):
        admin = seed.user(UserRole.ADMIN.value, "Admin")
        response = client.get("/api/tenants/4040/dues", headers=auth_headers(admin))
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_tenant_without_lease_owes_nothing(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop, monthly_rent="50000", lease_start_date=None)
        body = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(user)).json()
        assert body["months_stayed"] == 0
        assert Decimal(str(body["dues"]["rent_due"])) == 0
        assert body["payment_status"] == "up-to-date"

    def test_tenant_cannot_run_check_dues(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        response = client.post(f"/api/tenants/{tenant.id}/check-dues", headers=auth_headers(user))
        assert response.status_code == 403

    def test_store_outage_is_503(self, client, seed, prop, owner, monkeypatch):
        tenant = seed.tenant(prop)

        def boom(self, tenant_id):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(LedgerStore, "fetch_tenant", boom)
        response = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(owner))

        assert response.status_code == 503
        assert response.json()["detail"] == "Dues temporarily unavailable"


class TestTenantAnalytics:
    def test_monthly_projection(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        this_month = datetime.combine(date.today().replace(day=1), datetime.min.time()) + timedelta(hours=9)
        seed.payment(tenant, 10000, payment_date=this_month)
        seed.payment(tenant, 500, PaymentCategory.UTILITY, payment_date=this_month)

        response = client.get(f"/api/tenants/{tenant.id}/analytics?months_back=3", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert len(body["monthly_payments"]) == 3
        latest = body["monthly_payments"][-1]
        assert Decimal(str(latest["total"])) == Decimal("10500")
        assert latest["paid"] is True
        assert [item["name"] for item in body["payment_breakdown"]] == ["Rent", "Utility", "Deposit"]

    def test_months_back_validated(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        response = client.get(f"/api/tenants/{tenant.id}/analytics?months_back=0", headers=auth_headers(user))
        assert response.status_code == 422


class TestPayments:
    def test_initiate_confirm_flow(self, client, seed, prop, owner):
        user, tenant = _tenant_with_login(seed, prop, monthly_rent="10000", lease_start_date=date.today())

        created = client.post(
            "/api/payments",
            json={"tenant_id": tenant.id, "category": "Rent", "amount": "10000", "phone_number": "254700000000"},
            headers=auth_headers(user),
        )
        assert created.status_code == 201
        payment_id = created.json()["id"]
        assert created.json()["status"] == "pending"

        confirmed = client.post(
            f"/api/payments/{payment_id}/confirm",
            json={"transaction_id": "MPESA-XYZ"},
            headers=auth_headers(owner),
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "completed"

        again = client.post(
            f"/api/payments/{payment_id}/confirm",
            json={"transaction_id": "MPESA-XYZ"},
            headers=auth_headers(owner),
        )
        assert again.status_code == 200

        profile = client.get(f"/api/tenants/{tenant.id}", headers=auth_headers(user)).json()
        assert profile["payment_status"] == "up-to-date"
        assert Decimal(str(profile["total_rent_paid"])) == Decimal("10000")

    def test_fail_then_confirm_conflicts(self, client, seed, prop, owner):
        tenant = seed.tenant(prop)
        pending = seed.payment(tenant, 300, status=PaymentStatus.PENDING)

        failed = client.post(f"/api/payments/{pending.id}/fail", headers=auth_headers(owner))
        assert failed.json()["status"] == "failed"

        response = client.post(
            f"/api/payments/{pending.id}/confirm",
            json={"transaction_id": "LATE"},
            headers=auth_headers(owner),
        )
        assert response.status_code == 409

    def test_tenant_cannot_settle_own_payment(self, client, seed, prop):
        user, tenant = _tenant_with_login(
            seed, prop, monthly_rent="10000", lease_start_date=first_of_previous_month(date.today()),
        )
        pending = seed.payment(tenant, 20000, status=PaymentStatus.PENDING)

        confirmed = client.post(
            f"/api/payments/{pending.id}/confirm",
            json={"transaction_id": "MADE-UP"},
            headers=auth_headers(user),
        )
        failed = client.post(f"/api/payments/{pending.id}/fail", headers=auth_headers(user))

        assert confirmed.status_code == 403
        assert failed.status_code == 403
        body = client.get(f"/api/tenants/{tenant.id}/dues", headers=auth_headers(user)).json()
        assert body["payment_status"] == "overdue"
        assert Decimal(str(body["dues"]["total_remaining"])) == Decimal("20000")

    def test_manual_payment_requires_owner(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        response = client.post(
            "/api/payments/manual",
            json={"tenant_id": tenant.id, "category": "Rent", "amount": "100", "reference": "X"},
            headers=auth_headers(user),
        )
        assert response.status_code == 403

    def test_duplicate_manual_reference(self, client, seed, prop, owner):
        tenant = seed.tenant(prop)
        body = {"tenant_id": tenant.id, "category": "Deposit", "amount": "100", "reference": "DUP-1"}
        assert client.post("/api/payments/manual", json=body, headers=auth_headers(owner)).status_code == 201
        assert client.post("/api/payments/manual", json=body, headers=auth_headers(owner)).status_code == 409

    def test_rejects_non_positive_amount(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        response = client.post(
            "/api/payments",
            json={"tenant_id": tenant.id, "category": "Rent", "amount": "0"},
            headers=auth_headers(user),
        )
        assert response.status_code == 422

    def test_list_scoped_to_caller(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        other = seed.tenant(prop)
        seed.payment(tenant, 100)
        seed.payment(other, 200)

        body = client.get("/api/payments", headers=auth_headers(user)).json()
        assert body["total"] == 1
        assert body["payments"][0]["tenant_id"] == tenant.id

        filtered = client.get(f"/api/payments?tenant_id={other.id}", headers=auth_headers(user)).json()
        assert filtered["total"] == 0

    def test_list_status_filter(self, client, seed, prop, owner):
        tenant = seed.tenant(prop)
        seed.payment(tenant, 100)
        seed.payment(tenant, 200, status=PaymentStatus.PENDING)

        body = client.get("/api/payments?status=pending", headers=auth_headers(owner)).json()
        assert body["total"] == 1
        assert body["payments"][0]["status"] == "pending"


class TestTenantDelete:
    def test_owner_deletes_tenant_and_payments(self, client, seed, prop, owner):
        tenant = seed.tenant(prop)
        seed.payment(tenant, 100)

        response = client.delete(f"/api/tenants/{tenant.id}", headers=auth_headers(owner))
        assert response.status_code == 204

        listed = client.get("/api/payments", headers=auth_headers(owner)).json()
        assert listed["total"] == 0

    def test_tenant_cannot_delete(self, client, seed, prop):
        user, tenant = _tenant_with_login(seed, prop)
        response = client.delete(f"/api/tenants/{tenant.id}", headers=auth_headers(user))
        assert response.status_code == 403


class TestOwnerDashboard:
    def test_overview_reads_cached_snapshot(self, client, seed, prop, owner):
        today = date.today()
        lease = dict(
            monthly_rent="10000",
            lease_start_date=first_of_previous_month(today),
            lease_end_date=today + timedelta(days=365),
        )
        behind = seed.tenant(prop, **lease)
        seed.tenant(prop, **lease)
        seed.tenant(prop, monthly_rent="10000")  # no lease dates: not active

        body = client.get("/api/owners/me/overview", headers=auth_headers(owner)).json()

        assert body["total_tenants"] == 3
        assert body["occupied_units"] == 2
        assert body["overdue_tenants"] == 2
        assert Decimal(str(body["total_overdue_amount"])) == Decimal("40000")
        assert {row["cached_status"] for row in body["tenants"]} == {"unknown"}
        assert {row["payment_status"] for row in body["tenants"]} == {"overdue"}
        assert Decimal(str(body["total_payments"])) == 0

        # Completed payment the overview does not know about until reconciliation
        seed.payment(behind, 20000)
        stale = client.get("/api/owners/me/overview", headers=auth_headers(owner)).json()
        assert stale["overdue_tenants"] == 2
        assert Decimal(str(stale["total_payments"])) == Decimal("20000")

        checked = client.post("/api/owners/me/check-dues", headers=auth_headers(owner)).json()
        assert checked["checked"] == 3
        assert checked["overdue"] == 1

        fresh = client.get("/api/owners/me/overview", headers=auth_headers(owner)).json()
        assert fresh["overdue_tenants"] == 1
        assert Decimal(str(fresh["total_overdue_amount"])) == Decimal("20000")

    def test_charts(self, client, seed, prop, owner):
        tenant = seed.tenant(prop)
        this_month = datetime.combine(date.today().replace(day=1), datetime.min.time())
        seed.payment(tenant, 700, PaymentCategory.DEPOSIT, payment_date=this_month)

        body = client.get("/api/owners/me/charts", headers=auth_headers(owner)).json()

        assert len(body["monthly_payments"]) == 6
        assert Decimal(str(body["monthly_payments"][-1]["deposit"])) == Decimal("700")

    def test_tenant_role_rejected(self, client, seed, prop):
        user, _ = _tenant_with_login(seed, prop)
        assert client.get("/api/owners/me/overview", headers=auth_headers(user)).status_code == 403


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "database": "ok"}
