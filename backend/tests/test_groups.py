def test_create_group(client, auth_headers):
    res = client.post("/api/groups", json={
        "name": "Trip", "description": "Weekend trip"
    }, headers=auth_headers)
    assert res.status_code == 200
    data = res.json()
    assert data["name"] == "Trip"
    assert len(data["member_ids"]) == 1  # creator auto-added
    assert len(data["code"]) == 6
    assert data["code"].isalnum() and data["code"].upper() == data["code"]


def test_create_group_with_members(client, auth_headers, second_user):
    res = client.post("/api/groups", json={
        "name": "Flat", "member_usernames": ["erika"]
    }, headers=auth_headers)
    assert res.status_code == 200
    assert [m["username"] for m in res.json()["members"]] == ["max", "erika"]


def test_create_group_unknown_member(client, auth_headers):
    res = client.post("/api/groups", json={
        "name": "Flat", "member_usernames": ["nobody"]
    }, headers=auth_headers)
    assert res.status_code == 404


def test_list_groups(client, auth_headers):
    client.post("/api/groups", json={"name": "G1"}, headers=auth_headers)
    client.post("/api/groups", json={"name": "G2"}, headers=auth_headers)
    res = client.get("/api/groups", headers=auth_headers)
    assert res.status_code == 200
    assert [g["name"] for g in res.json()] == ["G1", "G2"]


def test_get_group_not_member(client, auth_headers, second_headers):
    res = client.post("/api/groups", json={"name": "Private"}, headers=auth_headers)
    gid = res.json()["id"]
    res = client.get(f"/api/groups/{gid}", headers=second_headers)
    assert res.status_code == 403


def test_get_group_missing(client, auth_headers):
    res = client.get("/api/groups/999", headers=auth_headers)
    assert res.status_code == 404


def test_update_group(client, auth_headers):
    res = client.post("/api/groups", json={"name": "Old"}, headers=auth_headers)
    gid = res.json()["id"]
    res = client.patch(f"/api/groups/{gid}", json={"name": "New"}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["name"] == "New"


def test_delete_group(client, auth_headers):
    res = client.post("/api/groups", json={"name": "Del"}, headers=auth_headers)
    gid = res.json()["id"]
    res = client.delete(f"/api/groups/{gid}", headers=auth_headers)
    assert res.status_code == 204
    res = client.get("/api/groups", headers=auth_headers)
    assert len(res.json()) == 0


def test_join_by_code(client, auth_headers, second_headers):
    res = client.post("/api/groups", json={"name": "Italy"}, headers=auth_headers)
    code = res.json()["code"]
    res = client.post("/api/groups/join", json={"code": code.lower()}, headers=second_headers)
    assert res.status_code == 200
    assert len(res.json()["member_ids"]) == 2

    res = client.post("/api/groups/join", json={"code": code}, headers=second_headers)
    assert res.status_code == 400


def test_join_unknown_code(client, auth_headers):
    res = client.post("/api/groups/join", json={"code": "ZZZZZZ"}, headers=auth_headers)
    assert res.status_code == 404


def test_add_member_by_username(client, auth_headers, second_user):
    res = client.post("/api/groups", json={"name": "G"}, headers=auth_headers)
    gid = res.json()["id"]
    res = client.post(f"/api/groups/{gid}/members", json={"username": "erika"}, headers=auth_headers)
    assert res.status_code == 200
    assert len(res.json()["member_ids"]) == 2

    res = client.post(f"/api/groups/{gid}/members", json={"username": "erika"}, headers=auth_headers)
    assert res.status_code == 400


def test_remove_member(client, auth_headers, second_user):
    res = client.post("/api/groups", json={"name": "G"}, headers=auth_headers)
    gid = res.json()["id"]
    client.post(f"/api/groups/{gid}/members", json={"username": "erika"}, headers=auth_headers)
    res = client.delete(f"/api/groups/{gid}/members/{second_user['id']}", headers=auth_headers)
    assert res.status_code == 200
    assert len(res.json()["member_ids"]) == 1


def test_remove_member_with_expenses_refused(client, auth_headers, second_user):
    res = client.post("/api/groups", json={"name": "G", "member_usernames": ["erika"]}, headers=auth_headers)
    gid = res.json()["id"]
    client.post("/api/expenses", json={
        "group_id": gid, "paid_by": "max", "amount": 20.0, "description": "Pizza"
    }, headers=auth_headers)
    res = client.delete(f"/api/groups/{gid}/members/{second_user['id']}", headers=auth_headers)
    assert res.status_code == 400
    assert "expenses" in res.json()["detail"]


def test_cannot_remove_yourself(client, auth_headers):
    res = client.post("/api/groups", json={"name": "G"}, headers=auth_headers)
    data = res.json()
    res = client.delete(f"/api/groups/{data['id']}/members/{data['member_ids'][0]}", headers=auth_headers)
    assert res.status_code == 400
