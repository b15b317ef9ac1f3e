import pytest

from isoboot_server.services.tree import TreeError, TreeNode, resolve, split_path


@pytest.mark.parametrize("path", ["", "/", "//", "///"])
def test_root_paths_resolve_to_root(image, path):
    assert resolve(image.root, path) is image.root


def test_empty_segments_are_ignored(image):
    a = resolve(image.root, "/boot/grub/grub.cfg")
    b = resolve(image.root, "//boot//grub/grub.cfg/")
    assert a is not None
    assert a is b
    assert a.name == "grub.cfg"


def test_directory_resolves(image):
    node = resolve(image.root, "/boot")
    assert node.is_dir
    assert [c.name for c in node.list_children()] == ["vmlinuz", "initrd.img", "grub"]


def test_match_is_case_sensitive(image):
    assert resolve(image.root, "/BOOT/vmlinuz") is None
    assert resolve(image.root, "/readme.txt") is None


def test_missing_intermediate_segment(image):
    # "grub.cfg" exists under boot/grub, but "nope" breaks the walk first
    assert resolve(image.root, "/boot/nope/grub.cfg") is None


def test_segment_below_a_file_is_not_found(image):
    assert resolve(image.root, "/README.txt/more") is None


def test_unreadable_directory_while_traversing_is_not_found(image):
    assert resolve(image.root, "/broken/anything") is None


def test_unreadable_directory_itself_still_resolves(image):
    node = resolve(image.root, "/broken")
    assert node is not None
    with pytest.raises(TreeError):
        node.list_children()


def test_dot_segments_are_plain_names(image):
    assert resolve(image.root, "/boot/../README.txt") is None


def test_split_path():
    assert split_path("//a//b/") == ["a", "b"]
    assert split_path("") == []


def test_file_has_no_children():
    node = TreeNode(name="f", is_dir=False)
    with pytest.raises(TreeError):
        node.list_children()
