"""Test module for doxygen_md package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import doxygen_md

    # Assert
    assert doxygen_md is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import doxygen_md

    # Assert
    assert isinstance(doxygen_md.__version__, str)
    assert doxygen_md.__version__ == "0.1.0"


def test_package_all_exports() -> None:
    """Test that __all__ contains the progressive API levels."""
    # Arrange & Act
    import doxygen_md

    # Assert
    for name in ("generate_markdown", "DoxygenMarkdownGenerator", "SymbolResolver", "get"):
        assert name in doxygen_md.__all__
        assert hasattr(doxygen_md, name)


def test_cli_version_matches_package() -> None:
    """Test that the CLI reports the package version."""
    # Arrange
    import doxygen_md
    from doxygen_md.cli.main import create_argument_parser

    # Act
    parser = create_argument_parser()
    version_action = next(action for action in parser._actions if "--version" in action.option_strings)

    # Assert
    assert doxygen_md.__version__ in version_action.version
