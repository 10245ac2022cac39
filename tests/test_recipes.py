"""Recipe API tests."""

from conftest import JPEG, MP4

from recipebook.models.recipe import Recipe

RECIPE_DATA = {
    "name": "Gỏi cuốn",
    "description": "Gỏi cuốn tôm thịt",
    "cook_time": "40",
    "level": "dễ",
    "ingredients": ["Bánh tráng", "Tôm", "Bún"],
    "recipe_types": ["Khai vị"],
    "steps[0][instruction]": "Luộc tôm",
    "steps[1][instruction]": "Cuốn bánh",
}


def create_recipe(client, headers, data=None, files=None) -> int:
    response = client.post(
        "/api/v1/recipes",
        headers=headers,
        data=data or RECIPE_DATA,
        files=files
        or [
            ("main_media", ("cover.jpg", JPEG, "image/jpeg")),
            ("steps[0][media]", ("tom.jpg", JPEG, "image/jpeg")),
            ("steps[0][media]", ("tom.mp4", MP4, "video/mp4")),
        ],
    )
    assert response.status_code == 201, response.text
    return response.json()["recipe_id"]


def test_create_recipe(client, auth_headers, db):
    """Test creating a recipe with steps and media."""
    recipe_id = create_recipe(client, auth_headers)

    recipe = db.get(Recipe, recipe_id)
    assert recipe.user_id == auth_headers.user_id
    assert recipe.thumbnail_img is not None


def test_create_requires_login(client):
    response = client.post("/api/v1/recipes", data=RECIPE_DATA)
    assert response.status_code == 401
    assert response.json()["detail"] == "Vui lòng đăng nhập lại!"


def test_create_validation_errors(client, auth_headers):
    data = {**RECIPE_DATA, "name": " ", "cook_time": "2000", "level": "?"}
    response = client.post("/api/v1/recipes", headers=auth_headers, data=data)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["message"] == "Vui lòng điền đầy đủ thông tin!"
    assert detail["errors"] == [
        "Tên công thức không được để trống",
        "Thời gian nấu phải từ 1-1440 phút",
        "Độ khó không hợp lệ",
    ]
    assert detail["input"]["ingredients"] == ["Bánh tráng", "Tôm", "Bún"]


def test_get_recipe(client, auth_headers):
    """Test getting a specific recipe."""
    recipe_id = create_recipe(client, auth_headers)

    response = client.get(f"/api/v1/recipes/{recipe_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Gỏi cuốn"
    assert [i["name"] for i in data["ingredients"]] == ["Bánh tráng", "Tôm", "Bún"]
    assert data["types"] == ["Khai vị"]
    assert [m["is_video"] for m in data["steps"][0]["media"]] == [False, True]
    assert data["current_user_id"] is None


def test_get_recipe_as_owner(client, auth_headers):
    recipe_id = create_recipe(client, auth_headers)

    data = client.get(f"/api/v1/recipes/{recipe_id}", headers=auth_headers).json()
    assert data["current_user_id"] == auth_headers.user_id
    assert data["viewer"]["is_own_recipe"] is True


def test_get_missing_recipe(client):
    response = client.get("/api/v1/recipes/99999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Không tìm thấy công thức"


def test_edit_form_and_update(client, auth_headers):
    recipe_id = create_recipe(client, auth_headers)

    form = client.get(f"/api/v1/recipes/{recipe_id}/edit", headers=auth_headers).json()
    kept_url = form["steps"][0]["existing_media_urls"][1]

    response = client.put(
        f"/api/v1/recipes/{recipe_id}",
        headers=auth_headers,
        data={
            **RECIPE_DATA,
            "name": "Gỏi cuốn chay",
            "ingredients": ["Bánh tráng", "Đậu hũ"],
            "steps[0][existing_media_urls]": [kept_url],
        },
        files=[("thumbnail_image", ("new.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 16, "image/png"))],
    )
    assert response.status_code == 200, response.text

    data = client.get(f"/api/v1/recipes/{recipe_id}").json()
    assert data["name"] == "Gỏi cuốn chay"
    assert [i["name"] for i in data["ingredients"]] == ["Bánh tráng", "Đậu hũ"]
    assert [m["url"] for m in data["steps"][0]["media"]] == [kept_url]
    assert data["thumbnail_img"].endswith(".png")


def test_update_by_other_user_forbidden(client, auth_headers, other_headers):
    recipe_id = create_recipe(client, auth_headers)

    response = client.put(f"/api/v1/recipes/{recipe_id}", headers=other_headers, data=RECIPE_DATA)
    assert response.status_code == 403
    assert response.json()["detail"] == "Bạn không có quyền chỉnh sửa công thức này"


def test_update_validation_requires_steps(client, auth_headers):
    recipe_id = create_recipe(client, auth_headers)
    data = {k: v for k, v in RECIPE_DATA.items() if not k.startswith("steps")}

    response = client.put(f"/api/v1/recipes/{recipe_id}", headers=auth_headers, data=data)
    assert response.status_code == 422
    assert "Phải có ít nhất 1 bước thực hiện" in response.json()["detail"]["errors"]


def test_delete_recipe(client, auth_headers, other_headers):
    recipe_id = create_recipe(client, auth_headers)

    assert client.delete(f"/api/v1/recipes/{recipe_id}", headers=other_headers).status_code == 403

    response = client.delete(f"/api/v1/recipes/{recipe_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Xóa công thức thành công"
    assert client.get(f"/api/v1/recipes/{recipe_id}").status_code == 404


def test_suggestions(client, auth_headers):
    create_recipe(client, auth_headers)
    data = client.get("/api/v1/recipes/suggestions").json()
    assert data["ingredients"] == ["Bánh tráng", "Bún", "Tôm"]
    assert data["recipe_types"] == ["Khai vị"]


def test_social_endpoints(client, auth_headers, other_headers):
    recipe_id = create_recipe(client, auth_headers)
    base = f"/api/v1/recipes/{recipe_id}"

    like = client.post(f"{base}/like", headers=other_headers).json()
    assert like == {"success": True, "is_liked": True, "like_count": 1}

    assert client.post(f"{base}/save", headers=other_headers).json()["is_saved"] is True
    assert client.post(f"{base}/share", headers=other_headers).json()["share_count"] == 1

    comment = client.post(f"{base}/comments", headers=other_headers, json={"body": "Ngon"})
    assert comment.json()["comment_count"] == 1

    blank = client.post(f"{base}/comments", headers=other_headers, json={"body": " "})
    assert blank.status_code == 422

    report = client.post(f"{base}/report", headers=other_headers, json={}).json()
    assert report["success"] is True
    again = client.post(f"{base}/report", headers=other_headers, json={"reason": "x"}).json()
    assert again == {"success": False, "message": "Bạn đã báo cáo công thức này rồi"}

    detail = client.get(base, headers=other_headers).json()
    assert detail["viewer"]["is_liked"] is True
    assert detail["viewer"]["is_saved"] is True
    assert detail["comment_count"] == 1


def test_like_requires_login(client, auth_headers):
    recipe_id = create_recipe(client, auth_headers)
    assert client.post(f"/api/v1/recipes/{recipe_id}/like").status_code == 401
