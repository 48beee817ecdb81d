"""
Pytest configuration for nml tests.
Adds src/ (for `import nml`) and the project root (for `tests.test_fixtures`)
to sys.path so the tests run without installing the package.
"""
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
for path in (project_root / "src", project_root):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from nml.nml_config import reset_config  # noqa: E402


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts and ends with the default numeric configuration."""
    reset_config()
    yield
    reset_config()
