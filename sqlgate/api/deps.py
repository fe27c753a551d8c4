from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from sqlgate.core.pool import DatabaseRegistry

# auto_error=False: the header is optional; only HTTP_BASIC databases use it
http_basic = HTTPBasic(auto_error=False)


def get_registry(request: Request) -> DatabaseRegistry:
    return request.app.state.registry


RegistryDep = Annotated[DatabaseRegistry, Depends(get_registry)]
BasicCredentialsDep = Annotated[HTTPBasicCredentials | None, Depends(http_basic)]
