from bitfreeze.offers import create_offer_code


def test_list_fridges(test_client):
    response = test_client.get("/api/fridges")
    assert response.status_code == 200
    fridges = response.json["fridges"]
    assert len(fridges) == 18
    assert fridges[4] == {
        "id": "2ft",
        "name": "2 ft Fridge",
        "price": 500,
        "dailyEarn": 25,
        "image": "/images/fridge2ft.jpg",
        "locked": False,
    }
    assert fridges[-1]["locked"]


def test_buy_fridge(test_client, seed_data, fund_account, auth_headers):
    fund_account("alice@example.com", balance=600)

    response = test_client.post("/api/buy", json={"fridgeId": "2ft"}, headers=auth_headers("alice@example.com"))

    assert response.status_code == 200
    assert response.json == {"message": "Bought 2 ft Fridge", "balance": 100}

    me = test_client.get("/api/me", headers=auth_headers("alice@example.com")).json["user"]
    assert me["fridges"][0]["id"] == "2ft"


def test_buy_fridge_insufficient_balance(test_client, seed_data, auth_headers):
    response = test_client.post("/api/buy", json={"fridgeId": "2ft"}, headers=auth_headers("alice@example.com"))
    assert response.status_code == 400
    assert response.json == {"error": "Insufficient balance"}


def test_buy_unknown_fridge(test_client, seed_data, auth_headers):
    response = test_client.post("/api/buy", json={"fridgeId": "99ft"}, headers=auth_headers("alice@example.com"))
    assert response.status_code == 404


def test_buy_requires_login(test_client):
    response = test_client.post("/api/buy", json={"fridgeId": "2ft"})
    assert response.status_code == 401


def test_redeem_offer_code(test_client, seed_data, auth_headers):
    create_offer_code("WELCOME50", 50)
    headers = auth_headers("bob@example.com")

    response = test_client.post("/api/offer/redeem", json={"code": "WELCOME50"}, headers=headers)
    assert response.status_code == 200
    assert "KES 50" in response.json["message"]

    response = test_client.post("/api/offer/redeem", json={"code": "WELCOME50"}, headers=headers)
    assert response.status_code == 409
    assert response.json == {"error": "You already used this code"}

    response = test_client.post("/api/offer/redeem", json={"code": "NOPE"}, headers=headers)
    assert response.status_code == 404
    assert response.json == {"error": "Invalid offer code"}
