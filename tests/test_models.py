"""Unit tests for namespace value types."""

from pyazfile.models import ChildEntry, DirectoryRef, EntryKind


class TestDirectoryRef:
    """Tests for DirectoryRef."""

    def test_root(self):
        root = DirectoryRef("photos")
        assert root.is_root
        assert root.name == ""
        assert root.parts == []
        assert str(root) == "photos"

    def test_child_of_root(self):
        child = DirectoryRef("photos").child("2023")
        assert child == DirectoryRef("photos", "2023")
        assert not child.is_root
        assert child.name == "2023"

    def test_nested_child(self):
        nested = DirectoryRef("photos").child("2023").child("summer")
        assert nested.path == "2023/summer"
        assert nested.parts == ["2023", "summer"]
        assert str(nested) == "photos/2023/summer"

    def test_parent(self):
        nested = DirectoryRef("photos", "2023/summer")
        assert nested.parent() == DirectoryRef("photos", "2023")
        assert nested.parent().parent() == DirectoryRef("photos")

    def test_root_is_its_own_parent(self):
        root = DirectoryRef("photos")
        assert root.parent() == root

    def test_file_path(self):
        assert DirectoryRef("photos").file_path("a.jpg") == "a.jpg"
        assert DirectoryRef("photos", "2023").file_path("a.jpg") == "2023/a.jpg"

    def test_refs_are_hashable(self):
        """Test that equal references collapse in a set."""
        refs = {DirectoryRef("s", "a"), DirectoryRef("s").child("a")}
        assert len(refs) == 1


class TestChildEntry:
    """Tests for ChildEntry."""

    def test_kind_flags(self):
        directory = ChildEntry("sub", EntryKind.DIRECTORY)
        file = ChildEntry("x.txt", EntryKind.FILE)
        assert directory.is_directory and not directory.is_file
        assert file.is_file and not file.is_directory
