import pytest
import synthcore as sc
from synthcore.config import ErrorMode


@pytest.fixture(autouse=True)
def _set_sample_rate():
    sc.set_sample_rate(44100)
    sc.set_error_mode(ErrorMode.STRICT)
    yield
    sc.set_sample_rate(44100)
    sc.set_error_mode(ErrorMode.STRICT)
