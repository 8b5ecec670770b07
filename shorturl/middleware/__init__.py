from shorturl.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
