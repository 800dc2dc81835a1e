import logging
from typing import Awaitable, Callable, List, Optional

import jwt
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class OwnerIdentityMiddleware(BaseHTTPMiddleware):
    """
    Resolves the owner of the request from the subject claim of a bearer token and
    adds a user_id attribute to the request.state. Otherwise responds with 401.

    If auth_disabled is set, every request is served as default_user_id.
    """

    def __init__(
        self,
        app,
        jwt_secret: str = "",
        jwt_algorithms: Optional[List[str]] = None,
        jwt_audience: Optional[str] = None,
        auth_disabled: bool = False,
        default_user_id: str = "test-user-id",
    ):
        self.jwt_secret = jwt_secret
        self.jwt_algorithms: List[str] = ["HS256"]
        if jwt_algorithms:
            self.jwt_algorithms = jwt_algorithms
        self.jwt_audience = jwt_audience
        self.auth_disabled = auth_disabled
        self.default_user_id = default_user_id
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        if request.method == "OPTIONS":
            return await call_next(request)

        if self.auth_disabled:
            request.state.user_id = self.default_user_id
            return await call_next(request)

        authorization_header = request.headers.get("authorization")
        if authorization_header is None:
            return Response(
                status_code=401, content="No authorization header passed with request"
            )

        user_token_list = authorization_header.split()
        if len(user_token_list) != 2 or user_token_list[0].lower() != "bearer":
            return Response(status_code=401, content="Wrong authorization header")
        user_token: str = user_token_list[-1]

        try:
            claims = jwt.decode(
                user_token,
                self.jwt_secret,
                algorithms=self.jwt_algorithms,
                audience=self.jwt_audience,
                options={"verify_aud": self.jwt_audience is not None},
            )
        except jwt.PyJWTError as e:
            logger.info(f"Rejected bearer token: {str(e)}")
            return Response(status_code=401, content="Invalid token")

        user_id: Optional[str] = claims.get("sub")
        if not user_id:
            logger.info("Rejected bearer token without subject claim")
            return Response(status_code=401, content="Token has no subject")

        request.state.user_id = str(user_id)
        return await call_next(request)


class CollectionPathMiddleware:
    """
    Serves the root routes of mounted sub-apps on their mount path without the trailing
    slash, instead of redirecting to it.
    """

    def __init__(self, app: ASGIApp, paths: List[str]) -> None:
        self.app = app
        self.paths = {path.rstrip("/") for path in paths}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"] in self.paths:
            scope = dict(scope)
            scope["path"] = scope["path"] + "/"
            raw_path = scope.get("raw_path")
            if raw_path is not None:
                scope["raw_path"] = raw_path + b"/"
        await self.app(scope, receive, send)
