from .cache import LocalCache
from .insights import InsightRequester
from .sync import FetchResult, SyncFacade, WriteResult

__all__ = ["FetchResult", "InsightRequester", "LocalCache", "SyncFacade", "WriteResult"]
