"""HTTP-level tests: envelopes, auth and role checks."""

PREFIX = "/api"


def _owners():
    return [
        {"owner_id": 1, "owner_name": "Maria Costa", "percentage": "60", "tax_country": "PT"},
        {"owner_id": 2, "owner_name": "Javier Ruiz", "percentage": "40", "tax_country": "ES"},
    ]


def _distribution(property_id, save):
    return {
        "property_id": property_id,
        "period_start": "2025-01-01",
        "period_end": "2025-12-31",
        "total_income": "12000",
        "total_expenses": "2000",
        "owners": _owners(),
        "save": save,
    }


async def test_health(client):
    response = await client.get(f"{PREFIX}/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_missing_token(client):
    response = await client.post(
        f"{PREFIX}/tax/calculate", json={"country": "PT", "annual_rental_income": "10000"}
    )
    assert response.status_code in (401, 403)


async def test_invalid_token(client):
    response = await client.get(
        f"{PREFIX}/tax/brackets/PT", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_tax_calculate(client, auth_headers):
    response = await client.post(
        f"{PREFIX}/tax/calculate",
        json={"country": "Portugal", "annual_rental_income": "10000"},
        headers=auth_headers("viewer"),
    )

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["country"] == "Portugal"
    assert body["data"]["tax_amount"] == "1210.68"


async def test_tax_brackets(client, auth_headers):
    response = await client.get(f"{PREFIX}/tax/brackets/es", headers=auth_headers())

    data = response.json()["data"]
    assert data["country"] == "Spain"
    assert [b["rate"] for b in data["brackets"]] == ["19", "24"]
    assert data["brackets"][-1]["max"] is None


async def test_unsupported_country_envelope(client, auth_headers):
    response = await client.get(f"{PREFIX}/tax/brackets/FR", headers=auth_headers())

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "Unsupported country" in body["message"]


async def test_quarterly_estimate(client, auth_headers):
    response = await client.post(
        f"{PREFIX}/tax/quarterly-estimate",
        json={"country": "ES", "quarterly_income": "10000"},
        headers=auth_headers(),
    )
    assert response.json()["data"]["quarterly_payment"] == "1962.50"


async def test_distribution_preview_is_not_stored(client, auth_headers, property_obj):
    headers = auth_headers("finance")
    response = await client.post(
        f"{PREFIX}/distributions", json=_distribution(property_obj.id, False), headers=headers
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["id"] is None
    assert data["total_tax"] == "1444.00"
    assert [s["net_share"] for s in data["shares"]] == ["5316.00", "3240.00"]

    history = await client.get(
        f"{PREFIX}/distributions", params={"property_id": property_obj.id}, headers=headers
    )
    assert history.json()["data"] == []


async def test_distribution_save_and_fetch(client, auth_headers, property_obj):
    headers = auth_headers("finance")
    saved = await client.post(
        f"{PREFIX}/distributions", json=_distribution(property_obj.id, True), headers=headers
    )
    assert saved.status_code == 201
    data = saved.json()["data"]
    assert data["version"] == 1
    assert data["calculated_by"] == 1

    fetched = await client.get(f"{PREFIX}/distributions/{data['id']}", headers=headers)
    assert fetched.json()["data"]["uuid"] == data["uuid"]

    notified = await client.post(
        f"{PREFIX}/distributions/{data['id']}/notify", headers=headers
    )
    assert notified.json()["data"]["notified"] == 2


async def test_distribution_requires_finance_role(client, auth_headers, property_obj):
    response = await client.post(
        f"{PREFIX}/distributions",
        json=_distribution(property_obj.id, False),
        headers=auth_headers("leasing"),
    )
    assert response.status_code == 403


async def test_percentages_must_total_hundred(client, auth_headers, property_obj):
    payload = _distribution(property_obj.id, False)
    payload["owners"][1]["percentage"] = "30"

    response = await client.post(
        f"{PREFIX}/distributions", json=payload, headers=auth_headers()
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_not_found_envelope(client, auth_headers):
    response = await client.get(f"{PREFIX}/distributions/999", headers=auth_headers())

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None


async def test_create_property(client, auth_headers):
    response = await client.post(
        f"{PREFIX}/properties",
        json={"property_code": "PRP-100", "property_name": "Avenida da Liberdade 5"},
        headers=auth_headers("manager"),
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["property_code"] == "PRP-100"
    assert data["country"] == "PT"


async def test_rent_roll_report(client, auth_headers, unit):
    response = await client.get(
        f"{PREFIX}/reports/rent-roll",
        params={"as_of": "2025-06-01"},
        headers=auth_headers("finance"),
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["units_count"] == 1
    assert data["occupancy_rate"] == "0.00"
    assert data["entries"][0]["unit_code"] == "1A"


async def test_reports_require_finance_role(client, auth_headers):
    response = await client.get(
        f"{PREFIX}/reports/tax", params={"year": 2025}, headers=auth_headers("leasing")
    )
    assert response.status_code == 403
