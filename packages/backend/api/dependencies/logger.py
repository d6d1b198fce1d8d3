import logging
from typing import Annotated

from fastapi import Depends, Request

routes_logger = logging.getLogger('uvicorn.error').getChild('tomatoes')


class RequestLogger(logging.LoggerAdapter):
    """Prefixes every message with the method and path being served."""

    def process(self, msg, kwargs):
        return f"{self.extra['method']} {self.extra['path']}: {msg}", kwargs


def get_logger(request: Request) -> logging.LoggerAdapter:
    return RequestLogger(routes_logger, {"method": request.method, "path": request.url.path})


LoggerDep = Annotated[logging.LoggerAdapter, Depends(get_logger)]
