from pathlib import Path

import pytest

from response_style_models.core.paths import (
    ProjectRootNotFound,
    get_project_root_dir,
)


def test_finds_marker_in_ancestor(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[project]\n")
    nested = tmp_path / "src" / "pkg"
    nested.mkdir(parents=True)

    assert get_project_root_dir(nested) == tmp_path.resolve()


def test_missing_marker(tmp_path: Path) -> None:
    # tmp_path lives outside any checkout
    with pytest.raises(ProjectRootNotFound):
        get_project_root_dir(tmp_path)


def test_default_is_this_checkout() -> None:
    root = get_project_root_dir()

    assert (root / "pyproject.toml").is_file()
    assert (root / "src" / "response_style_models").is_dir()
