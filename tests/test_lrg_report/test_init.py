"""Test module for lrg_report package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import lrg_report

    # Assert
    assert lrg_report is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import lrg_report

    # Assert
    assert isinstance(lrg_report.__version__, str)
    assert lrg_report.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    import lrg_report

    assert lrg_report.__author__ == "LRG Report Team"


def test_package_all_exports_resolve() -> None:
    """Test that every name in __all__ is importable from the package."""
    import lrg_report

    for name in lrg_report.__all__:
        assert hasattr(lrg_report, name), name


def test_level_one_functions_exported() -> None:
    """Test that the simple entry points are part of the public API."""
    import lrg_report

    for name in ("parse", "parse_string", "parse_file", "new_document", "write_document"):
        assert name in lrg_report.__all__
