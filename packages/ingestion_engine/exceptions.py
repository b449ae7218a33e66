class StatementDecodeError(ValueError):
    """The uploaded bytes could not be decoded into a sheet.

    This is the only error the ingestion engine raises; every per-row problem
    is absorbed by defaulting or skipping the row.
    """
