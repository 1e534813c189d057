import pytest

from checkmysql.source import ConnectivityError


class FakeSource:
    """Stands in for MySQLSource, answering queries by statement prefix

    A response is either a list of row dicts or an exception to raise.
    """

    def __init__(self, responses=None, connect_error=None):
        self.responses = responses or {}
        self.connect_error = connect_error
        self.queries = []
        self.connected = False
        self.closed = False

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def connect(self):
        if self.connect_error:
            raise ConnectivityError(self.connect_error)
        self.connected = True

    def close(self):
        self.closed = True

    def query(self, statement, params=()):
        statement = ' '.join(statement.split())
        self.queries.append((statement, params))
        for prefix, response in self.responses.items():
            if statement.startswith(prefix):
                if isinstance(response, Exception):
                    raise response
                return response
        return []


@pytest.fixture
def fake_source():
    return FakeSource
