# social_feed/api/posts/test_routes.py
import io


def _create(client, headers, text="Hello world", **extra):
    data = {"postInput": text, **extra}
    return client.post("/api/posts/", data=data, headers=headers, content_type="multipart/form-data")


def test_create_post_requires_login(db, client):
    response = _create(client, {})

    assert response.status_code == 401
    assert response.get_json()["error_code"] == "UNAUTHORIZED"
    assert not db.data.get('posts')


def test_create_post(client, auth_headers):
    response = _create(client, auth_headers())

    assert response.status_code == 201
    body = response.get_json()
    assert body["text"] == "Hello world"
    assert body["likes"] == []
    assert body["comments"] == []
    assert body["user"] == {"user_id": "u1", "user_image": "img", "first_name": "A", "last_name": "B"}
    assert "image_path" not in body


def test_create_post_with_blank_text(client, auth_headers):
    response = _create(client, auth_headers(), text="   ")

    assert response.status_code == 400
    assert response.get_json()["error_code"] == "VALIDATION_ERROR"


def test_create_post_with_too_long_text(app, client, auth_headers):
    text = "x" * (app.config["POST_TEXT_MAX_LENGTH"] + 1)
    response = _create(client, auth_headers(), text=text)
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "VALIDATION_ERROR"


def test_create_post_checks_login_before_text_length(app, db, client):
    text = "x" * (app.config["POST_TEXT_MAX_LENGTH"] + 1)
    response = _create(client, {}, text=text)

    assert response.status_code == 401
    assert response.get_json()["error_code"] == "UNAUTHORIZED"
    assert not db.data.get('posts')


def test_create_post_with_image(bucket, client, auth_headers):
    response = _create(client, auth_headers(), image=(io.BytesIO(b"\x89PNG"), "photo.png"))

    assert response.status_code == 201
    [path] = bucket.files
    assert bucket.files[path] == (b"\x89PNG", "image/png")
    assert response.get_json()["image_url"].endswith(f"{path}?method=GET")


def test_create_post_upload_failure(db, bucket, client, auth_headers):
    bucket.fail_uploads = True
    response = _create(client, auth_headers(), image=(io.BytesIO(b"img"), "photo.jpg"))

    assert response.status_code == 500
    assert response.get_json()["error_code"] == "POST_CREATION_FAILED"
    assert not db.data.get('posts')


def test_feed_is_newest_first(client, auth_headers):
    headers = auth_headers()
    for text in ["first", "second", "third"]:
        _create(client, headers, text=text)

    response = client.get("/api/posts/")

    assert response.status_code == 200
    assert [p["text"] for p in response.get_json()["posts"]] == ["third", "second", "first"]


def test_feed_storage_failure(db, client):
    db.failing_ops.add('stream')
    response = client.get("/api/posts/")
    assert response.status_code == 500


def test_get_post(client, auth_headers):
    post_id = _create(client, auth_headers()).get_json()["post_id"]

    response = client.get(f"/api/posts/{post_id}")

    assert response.status_code == 200
    assert response.get_json()["post_id"] == post_id


def test_get_missing_post(client):
    response = client.get("/api/posts/missing")
    assert response.status_code == 404


def test_like_twice_and_unlike(client, auth_headers):
    headers = auth_headers()
    post_id = _create(client, headers).get_json()["post_id"]

    client.post(f"/api/posts/{post_id}/like", headers=headers)
    response = client.post(f"/api/posts/{post_id}/like", headers=headers)
    assert response.status_code == 200
    assert response.get_json() == {"post_id": post_id, "likes": ["u1"]}

    response = client.post(f"/api/posts/{post_id}/unlike", headers=headers)
    assert response.get_json()["likes"] == []


def test_like_requires_login(client, auth_headers):
    post_id = _create(client, auth_headers()).get_json()["post_id"]
    response = client.post(f"/api/posts/{post_id}/like")
    assert response.status_code == 401


def test_like_missing_post(client, auth_headers):
    response = client.post("/api/posts/missing/like", headers=auth_headers())
    assert response.status_code == 404
    assert response.get_json()["error_code"] == "POST_NOT_FOUND"


def test_delete_post_by_author(db, client, auth_headers):
    headers = auth_headers()
    post_id = _create(client, headers).get_json()["post_id"]

    response = client.delete(f"/api/posts/{post_id}", headers=headers)

    assert response.status_code == 204
    assert post_id not in db.data['posts']


def test_delete_post_by_other_user(db, client, auth_headers):
    post_id = _create(client, auth_headers()).get_json()["post_id"]

    response = client.delete(f"/api/posts/{post_id}", headers=auth_headers(user_id="u2"))

    assert response.status_code == 403
    assert post_id in db.data['posts']


def test_delete_missing_post(client, auth_headers):
    response = client.delete("/api/posts/missing", headers=auth_headers())
    assert response.status_code == 404


def test_comment_routes(client, auth_headers):
    post_id = _create(client, auth_headers()).get_json()["post_id"]
    commenter = auth_headers(user_id="u2", first_name="C", last_name="D")

    first = client.post(f"/api/posts/{post_id}/comments", json={"text": "first"}, headers=commenter)
    second = client.post(f"/api/posts/{post_id}/comments", json={"text": "second"}, headers=commenter)
    assert first.status_code == 201
    assert first.get_json()["user"]["user_id"] == "u2"

    response = client.get(f"/api/posts/{post_id}/comments")
    assert response.status_code == 200
    assert [c["comment_id"] for c in response.get_json()["comments"]] == [
        second.get_json()["comment_id"], first.get_json()["comment_id"]
    ]

    feed = client.get("/api/posts/").get_json()["posts"]
    assert [c["text"] for c in feed[0]["comments"]] == ["second", "first"]


def test_empty_comment_is_rejected(db, client, auth_headers):
    headers = auth_headers()
    post_id = _create(client, headers).get_json()["post_id"]

    response = client.post(f"/api/posts/{post_id}/comments", json={"text": ""}, headers=headers)

    assert response.status_code == 400
    assert not db.data.get('comments')


def test_comment_on_missing_post(client, auth_headers):
    response = client.post("/api/posts/missing/comments", json={"text": "hi"}, headers=auth_headers())
    assert response.status_code == 404


def test_comments_of_missing_post(client):
    response = client.get("/api/posts/missing/comments")
    assert response.status_code == 404
