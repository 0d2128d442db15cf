from .mock_store import MockStore, MockIdentityVerifier, make_store_factory
