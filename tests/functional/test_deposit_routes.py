from bitfreeze.deposits import request_deposit


def _with_gateway_ref(deposit_repository, gateway_ref):
    deposit = request_deposit("bob@example.com", 1000, "254700000002")
    deposit.gateway_ref = gateway_ref
    deposit_repository.save(deposit)
    return deposit


def _callback_body(gateway_ref, result_code):
    return {
        "Body": {
            "stkCallback": {
                "MerchantRequestID": "m_1",
                "CheckoutRequestID": gateway_ref,
                "ResultCode": result_code,
                "ResultDesc": "The service request is processed successfully.",
            }
        }
    }


def test_request_deposit(test_client, seed_data, auth_headers):
    response = test_client.post(
        "/api/deposit",
        json={"amount": 1000, "phone": "254700000002"},
        headers=auth_headers("bob@example.com"),
    )
    assert response.status_code == 200
    assert response.json["status"] == "pending"
    assert response.json["message"] == "Deposit recorded as pending. Admin must confirm."
    assert response.json["depositId"]


def test_request_deposit_twice(test_client, seed_data, auth_headers):
    headers = auth_headers("bob@example.com")
    test_client.post("/api/deposit", json={"amount": 1000, "phone": "254700000002"}, headers=headers)

    response = test_client.post("/api/deposit", json={"amount": 1000, "phone": "254700000002"}, headers=headers)

    assert response.status_code == 409
    assert response.json == {"error": "You already have a pending deposit"}


def test_request_deposit_invalid_amount(test_client, seed_data, auth_headers):
    response = test_client.post(
        "/api/deposit",
        json={"amount": -10, "phone": "254700000002"},
        headers=auth_headers("bob@example.com"),
    )
    assert response.status_code == 400


def test_callback_confirms_deposit(test_client, seed_data, deposit_repository, account_repository):
    _with_gateway_ref(deposit_repository, "ws_CO_9")

    response = test_client.post("/api/mpesa/callback", json=_callback_body("ws_CO_9", 0))

    assert response.status_code == 200
    assert response.json == {"result": "ok - confirmed"}
    assert account_repository.get("bob@example.com").balance == 1000
    assert account_repository.get("alice@example.com").balance == 100

    # Provider retries are acknowledged without crediting again
    response = test_client.post("/api/mpesa/callback", json=_callback_body("ws_CO_9", 0))
    assert response.status_code == 200
    assert response.json == {"result": "already processed"}
    assert account_repository.get("bob@example.com").balance == 1000


def test_callback_failure(test_client, seed_data, deposit_repository, account_repository):
    deposit = _with_gateway_ref(deposit_repository, "ws_CO_10")

    response = test_client.post("/api/mpesa/callback", json=_callback_body("ws_CO_10", 1032))

    assert response.status_code == 200
    assert response.json == {"result": "not success"}
    assert not deposit_repository.get(deposit.id).is_pending()
    assert account_repository.get("bob@example.com").balance == 0


def test_callback_unknown_reference(test_client):
    response = test_client.post("/api/mpesa/callback", json=_callback_body("ws_CO_unknown", 0))
    assert response.status_code == 200
    assert response.json == {"result": "no matching deposit"}


def test_callback_without_reference(test_client):
    response = test_client.post("/api/mpesa/callback", json={"hello": "world"})
    assert response.status_code == 200
    assert response.json == {"result": "ignored - no checkout id"}


def test_callback_with_malformed_body(test_client):
    response = test_client.post("/api/mpesa/callback", json=[{"CheckoutRequestID": "ws_CO_1"}])
    assert response.status_code == 200
    assert response.json == {"result": "ignored - no checkout id"}

    response = test_client.post("/api/mpesa/callback", json={"Body": {"stkCallback": "garbage"}})
    assert response.status_code == 200
    assert response.json == {"result": "ignored - no checkout id"}

    response = test_client.post("/api/mpesa/callback", data="not json", content_type="application/json")
    assert response.status_code == 200
