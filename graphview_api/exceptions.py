# graphview_api/exceptions.py

class DataSourceError(Exception):
    """Raised when a data source cannot produce a data set (file, network or query failure)."""

    def __init__(self, message: str, source_type: str = ""):
        super().__init__(message)
        self.source_type = source_type
