from __future__ import annotations

from flask import Flask
from flask.testing import FlaskClient


def _signup(client: FlaskClient, name: str) -> str:
    email = f"{name.lower()}@x.com"
    client.post("/api/usuarios", json={"nome": name, "email": email, "senha": "segredo1"})
    login = client.post("/api/login", json={"email": email, "senha": "segredo1"})
    return login.get_json()["token"]


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _listing(**overrides) -> dict[str, object]:
    data: dict[str, object] = {
        "name": "Carlos Reparos",
        "service": "Eletricista",
        "category": "Reparos",
        "location": "Campinas, SP",
        "description": "Instalações e manutenção 100% garantidas",
    }
    data.update(overrides)
    return data


def test_create_provider_requires_auth(app: Flask) -> None:
    with app.test_client() as client:
        response = client.post("/api/prestadores", json=_listing())

    assert response.status_code == 401


def test_create_and_fetch_provider(app: Flask) -> None:
    with app.test_client() as client:
        token = _signup(client, "Carlos")
        created = client.post("/api/prestadores", json=_listing(), headers=_auth(token))
        again = client.post("/api/prestadores", json=_listing(name="Outro"), headers=_auth(token))
        provider_id = created.get_json()["id"]
        fetched = client.get(f"/api/prestadores/{provider_id}")
        missing = client.get("/api/prestadores/999")

    assert created.status_code == 201
    body = fetched.get_json()
    assert body["price"] == "A combinar"
    assert body["rating"] == 0.0
    assert body["reviews"] == 0
    assert again.status_code == 409
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "provider_not_found"


def test_search_filters(app: Flask) -> None:
    with app.test_client() as client:
        client.post("/api/prestadores", json=_listing(), headers=_auth(_signup(client, "Carlos")))
        client.post(
            "/api/prestadores",
            json=_listing(
                name="Dona Maria",
                service="Diarista",
                category="Limpeza",
                location="Santos, SP",
                description="Faxina residencial",
            ),
            headers=_auth(_signup(client, "Maria")),
        )

        everything = client.get(
            "/api/prestadores", query_string={"category": "Todos os serviços"}
        ).get_json()
        by_text = client.get("/api/prestadores?q=diar").get_json()
        by_location = client.get("/api/prestadores?location=campinas").get_json()
        by_category = client.get("/api/prestadores?category=LIMPEZA").get_json()
        wildcard = client.get("/api/prestadores", query_string={"q": "100%"}).get_json()
        featured = client.get("/api/prestadores?featured=true").get_json()

    assert [p["name"] for p in everything] == ["Carlos Reparos", "Dona Maria"]
    assert [p["name"] for p in by_text] == ["Dona Maria"]
    assert [p["name"] for p in by_location] == ["Carlos Reparos"]
    assert [p["name"] for p in by_category] == ["Dona Maria"]
    assert [p["name"] for p in wildcard] == ["Carlos Reparos"]
    assert featured == []


def test_reviews_keep_running_average(app: Flask) -> None:
    with app.test_client() as client:
        owner = _signup(client, "Carlos")
        provider_id = client.post(
            "/api/prestadores", json=_listing(), headers=_auth(owner)
        ).get_json()["id"]

        results = []
        for name, rating in (("Ana", 5), ("Bia", 4), ("Caio", 4)):
            results.append(
                client.post(
                    f"/api/prestadores/{provider_id}/avaliacoes",
                    json={"rating": rating, "comentario": f"nota {rating}", "serviceId": "svc-1"},
                    headers=_auth(_signup(client, name)),
                )
            )
        listed = client.get(f"/api/prestadores/{provider_id}/avaliacoes").get_json()
        provider = client.get(f"/api/prestadores/{provider_id}").get_json()

    assert [r.status_code for r in results] == [201, 201, 201]
    assert results[-1].get_json()["provider"] == {"id": provider_id, "rating": 4.33, "reviews": 3}
    assert provider["rating"] == 4.33
    assert provider["reviews"] == 3
    assert [r["autor_nome"] for r in listed] == ["Caio", "Bia", "Ana"]
    assert listed[0]["comentario"] == "nota 4"


def test_review_rules(app: Flask) -> None:
    with app.test_client() as client:
        owner = _signup(client, "Carlos")
        provider_id = client.post(
            "/api/prestadores", json=_listing(), headers=_auth(owner)
        ).get_json()["id"]
        reviewer = _signup(client, "Ana")

        own = client.post(
            f"/api/prestadores/{provider_id}/avaliacoes", json={"rating": 5}, headers=_auth(owner)
        )
        too_high = client.post(
            f"/api/prestadores/{provider_id}/avaliacoes", json={"rating": 6}, headers=_auth(reviewer)
        )
        as_text = client.post(
            f"/api/prestadores/{provider_id}/avaliacoes", json={"rating": "5"}, headers=_auth(reviewer)
        )
        unknown = client.post(
            "/api/prestadores/999/avaliacoes", json={"rating": 3}, headers=_auth(reviewer)
        )
        provider = client.get(f"/api/prestadores/{provider_id}").get_json()

    assert own.status_code == 403
    assert own.get_json()["error"] == "self_review_forbidden"
    assert too_high.status_code == 400
    assert as_text.status_code == 400
    assert unknown.status_code == 404
    assert provider["reviews"] == 0


def test_owner_edits_listing(app: Flask) -> None:
    with app.test_client() as client:
        owner = _signup(client, "Carlos")
        stranger = _signup(client, "Ana")
        created = client.post(
            "/api/prestadores", json=_listing(price="R$ 120"), headers=_auth(owner)
        ).get_json()
        url = f"/api/prestadores/{created['id']}"

        edited = client.patch(
            url, json={"description": "Agora também faço pintura", "price": ""}, headers=_auth(owner)
        )
        forbidden = client.patch(url, json={"description": "x"}, headers=_auth(stranger))
        anonymous = client.patch(url, json={"description": "x"})
        missing = client.patch("/api/prestadores/999", json={"price": "R$ 10"}, headers=_auth(owner))
        empty = client.patch(url, json={}, headers=_auth(owner))
        fetched = client.get(url).get_json()

    assert edited.status_code == 200
    assert edited.get_json()["description"] == "Agora também faço pintura"
    assert edited.get_json()["price"] == "A combinar"
    assert forbidden.status_code == 403
    assert forbidden.get_json()["error"] == "not_provider_owner"
    assert anonymous.status_code == 401
    assert missing.status_code == 404
    assert empty.status_code == 400
    assert fetched["description"] == "Agora também faço pintura"
    assert fetched["price"] == "A combinar"
    assert fetched["name"] == "Carlos Reparos"
