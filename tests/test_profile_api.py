async def test_profile_defaults_then_upsert(client, auth, user_id):
    resp = await client.get("/profile", headers=auth)
    assert resp.status_code == 200
    assert resp.json() == {"user_id": str(user_id), "business_name": None, "contact_info": None}

    resp = await client.put(
        "/profile",
        json={"business_name": "Annapurna", "contact_info": {"phone": "+91 98450 00000"}},
        headers=auth,
    )
    assert resp.status_code == 200

    resp = await client.put("/profile", json={"business_name": "Annapurna Mess"}, headers=auth)
    body = resp.json()
    assert body["business_name"] == "Annapurna Mess"
    assert body["contact_info"] == {"phone": "+91 98450 00000"}


async def test_profile_rejects_unknown_fields(client, auth):
    resp = await client.put("/profile", json={"tax_rate": "5"}, headers=auth)
    assert resp.status_code == 422
