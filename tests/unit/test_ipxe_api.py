from fastapi.testclient import TestClient

from isoboot_server.config import Settings
from isoboot_server.main_app import create_app


def test_boot_script_uses_host_header(client):
    resp = client.get("/boot.ipxe", headers={"Host": "10.0.0.5:8080"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == (
        "#!ipxe\n"
        "kernel http://10.0.0.5:8080/boot/vmlinuz console=ttyS0\n"
        "initrd http://10.0.0.5:8080/boot/initrd.img main\n"
        "boot"
    )


def test_boot_script_not_found_when_unconfigured(image):
    client = TestClient(create_app(image, settings=Settings(kernel_path="", initrds=[])))
    resp = client.get("/boot.ipxe")
    assert resp.status_code == 404
    assert resp.text == "Not Found\n"


def test_boot_script_not_found_without_initrd(image):
    client = TestClient(create_app(image, settings=Settings(kernel_path="/boot/vmlinuz", initrds=[])))
    assert client.get("/boot.ipxe").status_code == 404


def test_boot_host_setting_overrides_header(image):
    settings = Settings(kernel_path="/boot/vmlinuz", initrds=["/boot/initrd.img"], boot_host="pxe.lab:8080")
    client = TestClient(create_app(image, settings=settings))
    resp = client.get("/boot.ipxe", headers={"Host": "attacker.example"})
    assert "http://pxe.lab:8080/boot/vmlinuz" in resp.text
    assert "attacker.example" not in resp.text


def test_relative_paths_produce_valid_urls(image):
    client = TestClient(create_app(image, settings=Settings(kernel_path="vmlinuz", initrds=["initrd"])))
    resp = client.get("/boot.ipxe", headers={"Host": "h:1"})
    assert resp.text == "#!ipxe\nkernel http://h:1/vmlinuz \ninitrd http://h:1/initrd\nboot"
