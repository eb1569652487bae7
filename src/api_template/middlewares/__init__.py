from api_template.middlewares.exception_handler import ExceptionHandlerMiddleware

__all__ = ["ExceptionHandlerMiddleware"]
