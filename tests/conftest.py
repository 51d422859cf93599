import os, sys, pytest
# Ensure project root is on path so 'apiscribe' and 'scripts' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from apiscribe import DocumentBuilder, Info
from sample_app import create_app


@pytest.fixture()
def builder():
    return DocumentBuilder(Info(title='Test API', version='1.0.0'))


@pytest.fixture(scope='session')
def app_instance():
    app = create_app({'APISCRIBE_TITLE': 'Pet Store', 'APISCRIBE_VERSION': '2.0.0'})
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def spec(client):
    return client.get('/openapi.json').get_json()
