def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_single_health_route(client):
    response = client.get("/healthz")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
