from fastapi.testclient import TestClient

from isoboot_server.config import Settings
from isoboot_server.main_app import create_app


def test_root_listing(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.text == (
        "<html><body><ul>"
        '<li><a href="/boot">boot</a></li>'
        '<li><a href="/README.txt">README.txt</a></li>'
        '<li><a href="/empty">empty</a></li>'
        '<li><a href="/broken">broken</a></li>'
        '<li><a href="/My%20Files">My Files</a></li>'
        "</ul></body></html>"
    )


def test_nested_listing_links_are_absolute(client):
    resp = client.get("/boot/grub/")
    assert resp.status_code == 200
    assert '<a href="/boot/grub/grub.cfg">grub.cfg</a>' in resp.text


def test_quoted_request_path(client):
    resp = client.get("/My%20Files")
    assert resp.status_code == 200
    assert 'href="/My%20Files/a%26b.txt">a&amp;b.txt</a>' in resp.text


def test_file_is_byte_identical(client, contents):
    resp = client.get("/boot/vmlinuz")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/octet-stream"
    assert "content-length" not in resp.headers
    assert resp.content == contents["boot/vmlinuz"]
    assert client.get("/boot/initrd.img").content == contents["boot/initrd.img"]


def test_zero_length_file(client):
    resp = client.get("/empty")
    assert resp.status_code == 200
    assert resp.content == b""


def test_missing_path_is_not_found(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.text == "Not Found\n"


def test_missing_middle_segment_is_not_found(client):
    assert client.get("/boot/b/grub.cfg").status_code == 404


def test_unreadable_directory_is_server_error(client):
    resp = client.get("/broken")
    assert resp.status_code == 500
    assert resp.text == "Failed to get directory children\n"
    assert client.get("/broken/child").status_code == 404


def test_metrics_disabled_by_default(client):
    assert client.get("/metrics").status_code == 404


def test_metrics_when_configured(image):
    client = TestClient(create_app(image, settings=Settings(metrics_path="/_metrics")))
    client.get("/boot/vmlinuz")
    resp = client.get("/_metrics")
    assert resp.status_code == 200
    assert "isoboot_bytes_served_total" in resp.text
    pool = client.get("/_metrics/handle-pool").json()
    assert pool["checkout_count"] >= 1
    assert pool["in_use"] == 0


def test_metrics_path_with_trailing_slash(image):
    client = TestClient(create_app(image, settings=Settings(metrics_path="/_metrics/")))
    assert client.get("/_metrics").status_code == 200
