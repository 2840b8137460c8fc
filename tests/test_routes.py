import json
import os

from tests.conftest import make_png

COORDS = json.dumps({"x": 5, "y": 5})


def _analyse(client, png, face=COORDS, hair=COORDS, eye=COORDS):
    return client.post(
        "/analyse",
        files={"image": ("photo.png", png, "image/png")},
        data={"faceCoords": face, "hairCoords": hair, "eyeCoords": eye},
    )


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "Running"


def test_upload_stores_image(client, storage):
    response = client.post("/upload", files={"image": ("photo.png", make_png(), "image/png")})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Image uploaded"
    assert body["imageId"].endswith(".png")
    assert os.path.exists(os.path.join(storage.directory, body["imageId"]))


def test_upload_replaces_previous_image(client, storage):
    first = client.post("/upload", files={"image": ("a.png", make_png(), "image/png")}).json()["imageId"]
    second = client.post(
        "/upload",
        files={"image": ("b.png", make_png(), "image/png")},
        data={"previousImageId": first},
    ).json()["imageId"]

    assert not os.path.exists(os.path.join(storage.directory, first))
    assert os.path.exists(os.path.join(storage.directory, second))


def test_upload_ignores_missing_previous_image(client):
    response = client.post(
        "/upload",
        files={"image": ("a.png", make_png(), "image/png")},
        data={"previousImageId": "gone.png"},
    )
    assert response.status_code == 200


def test_upload_without_file(client):
    response = client.post("/upload", data={"previousImageId": "x.png"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


def test_analyse_classifies_and_cleans_up(client, storage):
    response = _analyse(client, make_png(color=(200, 120, 80)))
    assert response.status_code == 200
    body = response.json()

    assert body["detectedSeason"] == "True Spring"
    assert body["outfitSuggestions"] == ["Bright coral", "Leaf green", "Golden yellow"]
    assert body["faceColor"] == "rgb(200,120,80)"
    assert body["hairColor"] == "rgb(200,120,80)"
    assert body["eyeColor"] == "rgb(200,120,80)"
    assert body["dominantColor"] == "#c87850"
    assert body["colorPalette"] == ["#c87850"]
    assert round(body["faceHSL"]["h"]) == 20
    assert round(body["averageHSL"]["l"], 1) == 54.9

    # the analysed image is not kept around
    assert os.listdir(storage.directory) == []


def test_analyse_unknown_season(client):
    # very light blue: light tier with a hue above 150
    response = _analyse(client, make_png(color=(200, 220, 255)))
    body = response.json()
    assert body["detectedSeason"] == "Unknown Season"
    assert body["outfitSuggestions"] == ["No specific outfit recommendations."]


def test_analyse_without_file(client):
    response = client.post(
        "/analyse",
        data={"faceCoords": COORDS, "hairCoords": COORDS, "eyeCoords": COORDS},
    )
    assert response.status_code == 400


def test_analyse_with_bad_coordinates(client):
    response = _analyse(client, make_png(), face="not json")
    assert response.status_code == 400
    assert "faceCoords" in response.json()["detail"]


def test_analyse_with_out_of_bounds_coordinates(client, storage):
    response = _analyse(client, make_png(size=(20, 10)), eye=json.dumps({"x": 3, "y": 50}))
    assert response.status_code == 400
    assert os.listdir(storage.directory) == []


def test_analyse_with_non_image(client):
    response = client.post(
        "/analyse",
        files={"image": ("photo.png", b"garbage", "image/png")},
        data={"faceCoords": COORDS, "hairCoords": COORDS, "eyeCoords": COORDS},
    )
    assert response.status_code == 400


def test_get_uploaded_image(client):
    png = make_png()
    image_id = client.post("/upload", files={"image": ("a.png", png, "image/png")}).json()["imageId"]

    response = client.get(f"/uploads/{image_id}")
    assert response.status_code == 200
    assert response.content == png
    assert response.headers["content-type"] == "image/png"


def test_get_missing_image(client):
    assert client.get("/uploads/missing.png").status_code == 404


def test_delete_image(client, storage):
    image_id = client.post("/upload", files={"image": ("a.png", make_png(), "image/png")}).json()["imageId"]

    response = client.delete(f"/delete/{image_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Image deleted"}
    assert os.listdir(storage.directory) == []

    assert client.delete(f"/delete/{image_id}").status_code == 404


def test_delete_rejects_hidden_ids(client):
    assert client.delete("/delete/..secret").status_code == 400


def test_failed_upload_keeps_previous_image(client, storage):
    from app.dependencies import get_storage
    from app.main import app
    from app.services.storage import LocalImageStorage

    previous = client.post("/upload", files={"image": ("a.png", make_png(), "image/png")}).json()["imageId"]

    class FullDiskStorage(LocalImageStorage):
        def save(self, data, filename, content_type):
            raise OSError("No space left on device")

    app.dependency_overrides[get_storage] = lambda: FullDiskStorage(storage.directory)
    response = client.post(
        "/upload",
        files={"image": ("b.png", make_png(), "image/png")},
        data={"previousImageId": previous},
    )

    assert response.status_code == 500
    assert os.listdir(storage.directory) == [previous]


def test_analyse_oversized_image(client, monkeypatch):
    from PIL import Image

    png = make_png()
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    response = _analyse(client, png)
    assert response.status_code == 400
