"""Tests for assets module."""

import pytest
from sitestage.assets import get_default_layouts_dir


class TestGetDefaultLayoutsDir:
    """Tests for get_default_layouts_dir()."""

    def test__bundled_layouts_exist__returns_path(self) -> None:
        """Bundled layouts directory should be accessible."""
        layouts_dir = get_default_layouts_dir()

        assert layouts_dir.is_dir()
        assert (layouts_dir / "default.html").is_file()

    def test__layouts_not_directory__raises_file_not_found_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Should raise FileNotFoundError when layouts directory doesn't exist."""

        class FakeTraversable:
            def is_dir(self) -> bool:
                return False

            def joinpath(self, name: str) -> "FakeTraversable":
                return self

        monkeypatch.setattr("sitestage.assets.files", lambda _: FakeTraversable())

        with pytest.raises(
            FileNotFoundError,
            match="Bundled layouts not found",
        ):
            get_default_layouts_dir()
