import pytest
from fastapi.testclient import TestClient

from isoboot_server.config import Settings
from isoboot_server.main_app import create_app
from isoboot_server.services.memory_image import UnreadableDirectory, build_memory_image

KERNEL = b"\x7fELF" + bytes(range(256)) * 40
INITRD = b"initramfs" * 1000


@pytest.fixture
def image():
    img = build_memory_image(
        {
            "boot": {
                "vmlinuz": KERNEL,
                "initrd.img": INITRD,
                "grub": {"grub.cfg": b"set timeout=5\n"},
            },
            "README.txt": b"hello from the image\n",
            "empty": b"",
            "broken": UnreadableDirectory("bad extent"),
            "My Files": {"a&b.txt": b"x"},
        }
    )
    yield img
    img.close()


@pytest.fixture
def app_settings():
    return Settings(
        kernel_path="/boot/vmlinuz",
        kernel_params="console=ttyS0",
        initrds=["/boot/initrd.img,main"],
        chunk_size=1000,
    )


@pytest.fixture
def client(image, app_settings):
    app = create_app(image, settings=app_settings)
    return TestClient(app)


@pytest.fixture
def contents():
    return {"boot/vmlinuz": KERNEL, "boot/initrd.img": INITRD}
