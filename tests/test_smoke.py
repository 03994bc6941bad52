"""Smoke tests for basic vennconf functionality."""

import sys
from pathlib import Path


def test_imports() -> None:
    """Test that core modules can be imported."""
    import vennconf
    import vennconf.conformal
    import vennconf.pvalues
    import vennconf.venn_abers

    assert hasattr(vennconf, "__version__")
    assert vennconf.__version__ == "0.1.0"


def test_environment_setup() -> None:
    """Test that the project layout is in place."""
    assert Path("pyproject.toml").exists()
    assert Path("vennconf").exists()
    assert (Path("configs") / "vennconf.yaml").exists()


def test_python_version() -> None:
    assert sys.version_info >= (3, 9), "Python 3.9+ required"


def test_dependencies_importable() -> None:
    """Test that key dependencies can be imported."""
    import numpy
    import pandas
    import pydantic
    import scipy
    import sklearn
    import yaml

    assert numpy.__version__
    assert pandas.__version__
    assert pydantic.__version__
    assert scipy.__version__
    assert sklearn.__version__
    assert yaml.__version__
