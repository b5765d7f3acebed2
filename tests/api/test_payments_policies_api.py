from decimal import Decimal

import pytest

from insurance_api.api.v1.dependencies import get_policy_service
from insurance_api.core.exceptions import AuthorizationError, ConsistencyError, NotFoundError
from insurance_api.main import app
from insurance_api.schemas.enums import PaymentMethod
from insurance_api.services.policies.policy_service import IssuanceResult


@pytest.fixture(autouse=True)
def override_policy_service(mock_policy_service):
    app.dependency_overrides[get_policy_service] = lambda: mock_policy_service
    yield


def test_payment_issues_policy(
    test_client, auth_headers, mock_policy_service, sample_policy, sample_payment
):
    mock_policy_service.create_policy_from_payment.return_value = IssuanceResult(
        sample_policy, sample_payment, True
    )

    response = test_client.post(
        "/api/v1/payments",
        json={"offer_id": 42, "amount": "1500.00", "method": "bank_transfer"},
        headers=auth_headers(),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["created"] is True
    assert data["policy"]["policy_number"] == "POL-20250101-KNT-0042"
    assert data["payment"]["transaction_id"] == "TXN_20250101120000_1234"

    call = mock_policy_service.create_policy_from_payment.call_args
    assert call.args[0] == 42
    assert call.args[1] == Decimal("1500.00")
    assert call.kwargs["method"] == PaymentMethod.BANK_TRANSFER


def test_repeated_payment_returns_existing_policy(
    test_client, auth_headers, mock_policy_service, sample_policy, sample_payment
):
    mock_policy_service.create_policy_from_payment.return_value = IssuanceResult(
        sample_policy, sample_payment, False
    )

    response = test_client.post(
        "/api/v1/payments", json={"offer_id": 42, "amount": "1500"}, headers=auth_headers()
    )

    assert response.status_code == 200
    assert response.json()["data"]["created"] is False
    assert response.json()["message"] == "Policy already issued"


@pytest.mark.parametrize("amount", ["0", "-10"])
def test_payment_amount_must_be_positive(test_client, auth_headers, mock_policy_service, amount):
    response = test_client.post(
        "/api/v1/payments", json={"offer_id": 42, "amount": amount}, headers=auth_headers()
    )

    assert response.status_code == 422
    mock_policy_service.create_policy_from_payment.assert_not_called()


def test_payment_for_unpayable_offer(test_client, auth_headers, mock_policy_service):
    mock_policy_service.create_policy_from_payment.side_effect = ConsistencyError(
        "Cannot move offer from 'pending' to 'paid'"
    )

    response = test_client.post(
        "/api/v1/payments", json={"offer_id": 42, "amount": "100"}, headers=auth_headers()
    )

    assert response.status_code == 409


def test_get_policy_by_offer(test_client, auth_headers, mock_policy_service, sample_policy):
    mock_policy_service.get_policy_by_offer.return_value = sample_policy

    response = test_client.get("/api/v1/policies/offer/42", headers=auth_headers())

    assert response.status_code == 200
    assert response.json()["data"]["id"] == 11
    assert mock_policy_service.get_policy_by_offer.call_args.args[0] == 42


def test_get_policy_by_number_forbidden(test_client, auth_headers, mock_policy_service):
    mock_policy_service.get_policy_by_number.side_effect = AuthorizationError(
        "This policy belongs to another customer"
    )

    response = test_client.get(
        "/api/v1/policies/number/POL-20250101-KNT-0042", headers=auth_headers()
    )

    assert response.status_code == 403


def test_list_policy_payments(test_client, auth_headers, mock_policy_service, sample_payment):
    mock_policy_service.list_payments_for_policy.return_value = [sample_payment]

    response = test_client.get("/api/v1/policies/11/payments", headers=auth_headers(1, "admin"))

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 1


def test_list_payments_for_missing_policy(test_client, auth_headers, mock_policy_service):
    mock_policy_service.list_payments_for_policy.side_effect = NotFoundError("Policy 99 not found")

    response = test_client.get("/api/v1/policies/99/payments", headers=auth_headers())

    assert response.status_code == 404
