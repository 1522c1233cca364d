"""BulkPost scheduling core.

The package coordinates bulk publishing: a global request rate limiter,
retries with exponential backoff, bounded parallelism and a registry of
series. HTTP routes stay thin facades over these services.
"""
