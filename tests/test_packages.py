"""Tests for package boundary detection."""

from scanner.packages import get_package_name


class TestGetPackageName:
    """Tests for deriving the owning package of a file."""

    def test_project_file(self):
        """Test that project files have no package."""
        assert get_package_name("/proj/src/a.js") is None

    def test_plain_package(self):
        """Test a regular package."""
        assert get_package_name("/proj/node_modules/lodash/index.js") == "lodash"

    def test_deep_file(self):
        """Test a file deep inside a package."""
        assert get_package_name("/proj/node_modules/lodash/fp/map.js") == "lodash"

    def test_scoped_package(self):
        """Test a scoped package."""
        assert get_package_name("/proj/node_modules/@babel/core/lib/index.js") == "@babel/core"

    def test_nested_install(self):
        """Test that the innermost node_modules wins."""
        path = "/proj/node_modules/a/node_modules/b/index.js"

        assert get_package_name(path) == "b"

    def test_dotted_name(self):
        """Test package names containing dots."""
        assert get_package_name("/proj/node_modules/lodash.debounce/index.js") == "lodash.debounce"

    def test_windows_separators(self):
        """Test Windows-style paths."""
        assert get_package_name("C:\\proj\\node_modules\\left-pad\\index.js") == "left-pad"

    def test_node_modules_file_without_package(self):
        """Test a file directly inside node_modules."""
        assert get_package_name("/proj/node_modules/.yarn-integrity") is None
