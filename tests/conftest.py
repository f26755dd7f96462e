import os
import sys

import pytest

# Ensure the project root is in sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.helpers.ports import free_port  # noqa: E402


@pytest.fixture
def tcp_port():
    return free_port()
