"""Verify package imports work correctly."""


def test_import_sexpstream() -> None:
    """Test that sexpstream can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import sexpstream

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert sexpstream.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from sexpstream import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_names_exist() -> None:
    """Every name in __all__ is importable from the package."""
    import sexpstream

    for name in sexpstream.__all__:
        assert hasattr(sexpstream, name), name
