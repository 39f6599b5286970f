class StoreError(Exception):
    pass


class ConnectivityError(StoreError):
    """The store could not be reached or did not answer in time."""


class QueryError(StoreError):
    """The store rejected a statement."""


class UnknownStoreError(StoreError):
    pass
