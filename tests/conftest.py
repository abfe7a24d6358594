"""
Shared fixtures: a fresh application (and so a fresh roster and counter)
for every test.
"""
import pytest

from app import create_app


@pytest.fixture()
def app():
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
    })
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def state(app):
    return app.config['SCHOOL_STATE']


@pytest.fixture()
def valid_form():
    return {
        'lastname': 'Curie',
        'firstname': 'Marie',
        'birthdate': '1990-05-01',
        'gender': 'Féminin',
    }
