def _article():
    return {"title": "T", "description": "D", "resumo": "R"}

def _storage_down(monkeypatch):
    import blog.ingestion as ingestion

    def boom(*args, **kwargs):
        raise RuntimeError("database is gone")

    monkeypatch.setattr(ingestion, "create_post", boom)


def test_security_headers_are_set(client):
    r = client.get("/")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert "default-src 'self'" in r.headers["Content-Security-Policy"]

def test_health_and_ready(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert client.get("/ready").json() == {"status": "ready"}

def test_metrics_count_requests_by_route(client):
    client.get("/post/1")
    client.get("/post/2")
    client.get("/")
    snapshot = client.get("/metrics").json()
    assert {"method": "GET", "path": "/post/{post_id}", "status": 404, "count": 2} in snapshot["requests"]
    assert {"method": "GET", "path": "/", "status": 200, "count": 1} in snapshot["requests"]
    assert snapshot["total"] == 3

def test_unknown_paths_share_one_metrics_label(client):
    client.get("/nope/a")
    client.get("/nope/b")
    client.get("/wp-admin.php")
    snapshot = client.get("/metrics").json()
    assert snapshot["requests"] == [
        {"method": "GET", "path": "<unmatched>", "status": 404, "count": 3}
    ]

def test_server_errors_are_counted_and_carry_security_headers(client, monkeypatch):
    _storage_down(monkeypatch)
    api = client.post("/api/post", json={"artigos": [_article()]})
    assert api.status_code == 500
    assert api.json() == {"error": "Internal server error"}
    assert api.headers["X-Content-Type-Options"] == "nosniff"

    form = client.post("/post", data={"title": "T", "resumo": "S", "description": "C"})
    assert form.status_code == 500
    assert form.headers["X-Frame-Options"] == "SAMEORIGIN"

    snapshot = client.get("/metrics").json()
    assert {"method": "POST", "path": "/api/post", "status": 500, "count": 1} in snapshot["requests"]
    assert {"method": "POST", "path": "/post", "status": 500, "count": 1} in snapshot["requests"]

def test_bulk_api_is_rate_limited(client, rate_limited):
    body = {"artigos": []}
    statuses = [client.post("/api/post", json=body).status_code for _ in range(11)]
    assert statuses[:10] == [400] * 10
    assert statuses[10] == 429
    # other routes have their own budget
    assert client.get("/").status_code == 200

def test_single_post_view_carries_the_post_limit(client, rate_limited):
    statuses = [client.get("/post/1").status_code for _ in range(21)]
    assert statuses[:20] == [404] * 20
    assert statuses[20] == 429
