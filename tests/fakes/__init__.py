from tests.fakes.fake_store_backend import DB_PATH, FakeStoreBackend

__all__ = ["DB_PATH", "FakeStoreBackend"]
