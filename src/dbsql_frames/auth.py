from enum import Enum
from typing import Dict


# HTTP request headers
class HttpHeader(str, Enum):
    CONTENT_TYPE = "Content-Type"
    AUTHORIZATION = "Authorization"
    USER_AGENT = "User-Agent"


class AuthProvider:
    def add_headers(self, request_headers: Dict[str, str]):
        pass


class AccessTokenAuthProvider(AuthProvider):
    def __init__(self, access_token: str):
        self.__authorization_header_value = "Bearer {}".format(access_token)

    def add_headers(self, request_headers: Dict[str, str]):
        request_headers[HttpHeader.AUTHORIZATION.value] = (
            self.__authorization_header_value
        )
