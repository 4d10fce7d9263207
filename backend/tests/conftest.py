import pytest

from app.services.result_store import result_store


@pytest.fixture(autouse=True)
def _clear_result_store():
    """Each test starts with an empty process-wide result store."""
    result_store.clear()
    yield
    result_store.clear()
