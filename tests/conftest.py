import pytest


@pytest.fixture
def client():
    from app import app
    app.config.update(TESTING=True)
    with app.test_client() as c:
        yield c
