"""
Tests for configuration defaults.
"""

import importlib
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from reviewlda.config import settings


def test_roots_follow_working_directory():
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("REVIEWLDA_HOME", None)
        reloaded = importlib.reload(settings)

        assert reloaded.DATA_ROOT == Path.cwd() / "data"
        assert reloaded.OUTPUT_ROOT == Path.cwd() / "output"

    importlib.reload(settings)


def test_home_override(tmp_path):
    with patch.dict(os.environ, {"REVIEWLDA_HOME": str(tmp_path)}):
        reloaded = importlib.reload(settings)

        assert reloaded.DATA_ROOT == tmp_path / "data"
        assert reloaded.OUTPUT_ROOT == tmp_path / "output"

    importlib.reload(settings)


def test_roots_outside_installed_package():
    package_dir = Path(settings.__file__).resolve().parent.parent

    assert package_dir not in settings.DATA_ROOT.resolve().parents


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
