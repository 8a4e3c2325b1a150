# tests/test_auth.py

from taskboard import ids
from taskboard.routers.auth import create_access_token, get_password_hash, verify_password


def test_signup_signin_and_me(client):
    client.sign_out()

    signup = client.post("/api/auth/signup", json={"email": "carol@example.com", "password": "s3cret"})
    assert signup.status_code == 200
    user_id = signup.json()["user"]["id"]

    signin = client.post("/api/auth/signin", json={"email": "carol@example.com", "password": "s3cret"})
    assert signin.status_code == 200
    token = signin.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "carol@example.com"
    assert me.json()["id"] == user_id


def test_signin_with_wrong_password_is_401(client):
    client.post("/api/auth/signup", json={"email": "dave@example.com", "password": "right"})
    response = client.post("/api/auth/signin", json={"email": "dave@example.com", "password": "wrong"})
    assert response.status_code == 401


def test_duplicate_signup_is_400(client):
    payload = {"email": "erin@example.com", "password": "pw"}
    assert client.post("/api/auth/signup", json=payload).status_code == 200
    assert client.post("/api/auth/signup", json=payload).status_code == 400


def test_bearer_token_scopes_task_requests(client, owner):
    client.sign_out()
    token = client.post(
        "/api/auth/signup", json={"email": "frank@example.com", "password": "pw"}
    ).json()["access_token"]

    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["count"] == 0


def test_session_cookie_authenticates_until_signout(client):
    client.sign_out()
    client.post("/api/auth/signup", json={"email": "gina@example.com", "password": "pw"})

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["email"] == "gina@example.com"

    assert client.post("/api/auth/signout").json() == {"success": True}
    assert client.get("/api/auth/me").status_code == 401


def test_token_for_unknown_owner_is_401(client):
    client.sign_out()
    token = create_access_token(ids.decode(ids.generate()))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_token_subject_must_be_an_owner_id(client):
    client.sign_out()
    token = create_access_token("alice@example.com")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_password_hash_round_trip():
    hashed = get_password_hash("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
