# tests/conftest.py
from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest

# Root of repo: tests/.. = project root
PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Where we expect assets
TEST_ASSETS_DIR = PROJECT_ROOT / "samples" / "input" / "test_assets"

GENERATOR_PATH = PROJECT_ROOT / "examples" / "generate_test_assets.py"

# Names we want to exist
IMAGE_FILES = [
    "img_checker.png",
    "img_checker_alpha.png",
    "img_gradients.png",
    "img_gradients_rgba.png",
    "img_gradients16.png",
    "img_radial16.png",
    "img_radial_float.tif",
    "img_gradients_float.tif",
]


def _have_all_assets(folder: Path) -> bool:
    return all((folder / name).exists() for name in IMAGE_FILES)


def _generate_assets(out_dir: Path) -> None:
    """Run examples/generate_test_assets.py, writing into `out_dir`."""
    if not GENERATOR_PATH.exists():
        pytest.skip(f"Asset generator not found: {GENERATOR_PATH}")

    spec = importlib.util.spec_from_file_location("generate_test_assets", str(GENERATOR_PATH))
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)  # type: ignore[union-attr]

    module.main(out_folder=str(out_dir))


@pytest.fixture(scope="session")
def test_assets_dir(tmp_path_factory) -> Path:
    """
    Folder holding the synthetic image assets.

    Uses samples/input/test_assets when it is already populated, otherwise
    generates a fresh set into a session temp dir so the tree stays clean.
    """
    if _have_all_assets(TEST_ASSETS_DIR):
        return TEST_ASSETS_DIR

    out_dir = tmp_path_factory.mktemp("test_assets")
    _generate_assets(out_dir)

    if not _have_all_assets(out_dir):
        pytest.fail(f"Asset generator did not produce all of {IMAGE_FILES} in {out_dir}")
    return out_dir
