"""
HTTP client for the GalactaVista REST API.
Single point of HTTP access: builds requests, attaches the bearer token,
unwraps the response envelope and maps failures onto the client exceptions.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from galactavista.config import get_settings
from galactavista.schemas import (
    APIEnvelope,
    AgentPropertyFilters,
    HealthStatus,
    LoginRequest,
    LoginResponse,
    PaginatedProperties,
    PropertyCreate,
    PropertyResponse,
    PropertySearchFilters,
    PropertyUpdate,
    UserRegisterRequest,
    UserResponse,
    UserUpdate,
)
from galactavista.utils.auth import TokenHolder, build_auth_header
from galactavista.utils.exceptions import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
    http_error_for_status,
)
from galactavista.utils.query import build_query_params
from galactavista.utils.validators import ValidationUtils, validate_model

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)
Payload = Union[BaseModel, Mapping[str, Any]]

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."


class APIClient:
    """
    Async client for the property listing API.

    The bearer token lives in a ``TokenHolder`` that is injected by the owner
    of the session; clients sharing a holder share the token.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_holder: Optional[TokenHolder] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token_holder = token_holder if token_holder is not None else TokenHolder()
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout or settings.request_timeout)

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    # Configuration

    def configure(self, base_url: str) -> None:
        """Point the client at another host. No I/O."""
        self.base_url = base_url.rstrip("/")

    def set_token(self, token: str) -> None:
        self.token_holder.set(token)

    def clear_token(self) -> None:
        self.token_holder.clear()

    @property
    def token(self) -> Optional[str]:
        return self.token_holder.token

    # Transport

    def build_headers(self, json_body: bool = True) -> Dict[str, str]:
        """Headers for the next request, reflecting the current token."""
        headers = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        headers.update(build_auth_header(self.token_holder.token))
        return headers

    async def send(
        self,
        method: str,
        endpoint: str,
        body: Optional[Payload] = None,
        params: Optional[Payload] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Issue a request and map transport and status failures.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL, starting with ``/``
            body: JSON body (pydantic model or mapping)
            params: Filter object serialized into query parameters
            files: Multipart files; when given the body is not JSON

        Returns:
            The 2xx response

        Raises:
            NetworkError: If the server cannot be reached
            AuthenticationError: On 401, after clearing the token
            HttpError: On any other non-2xx status
        """
        url = f"{self.base_url}{endpoint}"
        headers = self.build_headers(json_body=files is None)
        query = build_query_params(params) or None
        content = json.dumps(_serialize(body)) if body is not None else None

        logger.debug(f"{method} {url}")
        try:
            response = await self._http.request(
                method,
                url,
                params=query,
                content=content,
                files=files,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.warning(f"{method} {endpoint} failed: {e!r}")
            raise NetworkError(NETWORK_ERROR_MESSAGE, cause=e) from e

        if response.status_code == 401:
            # token expired or invalid
            self.clear_token()
            logger.info(f"{method} {endpoint} rejected with 401, token cleared")
            raise AuthenticationError(_error_detail(response) or "Authentication failed")

        if not response.is_success:
            detail = _error_detail(response)
            logger.debug(f"{method} {endpoint} failed with status {response.status_code}: {detail}")
            raise http_error_for_status(response.status_code, detail)

        return response

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Payload] = None,
        params: Optional[Payload] = None,
        expect_data: bool = True,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the envelope's ``data``.

        Raises:
            ProtocolError: If the 2xx body is not an envelope, reports failure,
                or lacks ``data`` while ``expect_data`` is set
        """
        response = await self.send(method, endpoint, body=body, params=params, files=files)
        envelope = _parse_envelope(response)

        if not envelope.success:
            raise ProtocolError(
                envelope.error_message or "Server reported failure on a successful status",
                payload=envelope.model_dump()
            )
        if expect_data and envelope.data is None:
            raise ProtocolError(f"Response to {method} {endpoint} is missing data", payload=envelope.model_dump())
        return envelope.data

    # Auth

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Log in and keep the issued token for subsequent requests.
        """
        credentials = validate_model(LoginRequest, {"email": email, "password": password})
        data = await self.request("/auth/login", "POST", body=credentials)
        result = parse_model(LoginResponse, data)
        self.set_token(result.token)
        return result

    async def register(self, user_data: Union[UserRegisterRequest, Mapping[str, Any]]) -> UserResponse:
        """Create an account. No token is issued."""
        payload = validate_model(UserRegisterRequest, user_data)
        data = await self.request("/auth/register", "POST", body=payload)
        return parse_model(UserResponse, data)

    async def get_profile(self) -> UserResponse:
        data = await self.request("/auth/profile")
        return parse_model(UserResponse, data)

    async def update_profile(self, profile_data: Union[UserUpdate, Mapping[str, Any]]) -> UserResponse:
        """
        Update the current user's profile and return the stored record.

        The server may acknowledge without echoing the user; the record is
        then read back from the profile endpoint.
        """
        payload = validate_model(UserUpdate, profile_data)
        data = await self.request("/auth/profile", "PUT", body=payload, expect_data=False)
        if data is None:
            return await self.get_profile()
        return parse_model(UserResponse, data)

    # Properties

    async def get_properties(
        self,
        filters: Optional[Union[PropertySearchFilters, Mapping[str, Any]]] = None
    ) -> PaginatedProperties:
        params = validate_model(PropertySearchFilters, filters) if filters is not None else None
        data = await self.request("/properties", params=params)
        return parse_model(PaginatedProperties, data)

    async def get_property(self, property_id: int) -> PropertyResponse:
        ValidationUtils.validate_id(property_id, "property_id")
        data = await self.request(f"/properties/{property_id}")
        return parse_model(PropertyResponse, data)

    async def create_property(self, property_data: Union[PropertyCreate, Mapping[str, Any]]) -> PropertyResponse:
        payload = validate_model(PropertyCreate, property_data)
        data = await self.request("/properties", "POST", body=payload)
        return parse_model(PropertyResponse, data)

    async def update_property(
        self,
        property_id: int,
        property_data: Union[PropertyUpdate, Mapping[str, Any]]
    ) -> PropertyResponse:
        ValidationUtils.validate_id(property_id, "property_id")
        payload = validate_model(PropertyUpdate, property_data)
        data = await self.request(f"/properties/{property_id}", "PUT", body=payload)
        return parse_model(PropertyResponse, data)

    async def delete_property(self, property_id: int) -> None:
        ValidationUtils.validate_id(property_id, "property_id")
        await self.request(f"/properties/{property_id}", "DELETE", expect_data=False)

    async def get_properties_by_agent(
        self,
        filters: Optional[Union[AgentPropertyFilters, Mapping[str, Any]]] = None
    ) -> PaginatedProperties:
        params = validate_model(AgentPropertyFilters, filters) if filters is not None else None
        data = await self.request("/properties/agent", params=params)
        return parse_model(PaginatedProperties, data)

    # Health

    async def health_check(self) -> HealthStatus:
        """
        Check the server health.

        Accepts both an enveloped payload and the bare ``{"status": ...}``
        body the health route answers with.
        """
        response = await self.send("GET", "/health")
        payload = _json_body(response)
        if isinstance(payload, dict) and "success" in payload:
            envelope = _parse_envelope(response)
            if not envelope.success or envelope.data is None:
                raise ProtocolError("Health check response is missing data", payload=payload)
            payload = envelope.data
        return parse_model(HealthStatus, payload)


def _serialize(body: Payload) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_none=True)
    return dict(body)


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ProtocolError("Response body is not valid JSON") from e


def _parse_envelope(response: httpx.Response) -> APIEnvelope:
    payload = _json_body(response)
    try:
        return APIEnvelope.model_validate(payload)
    except PydanticValidationError as e:
        raise ProtocolError("Response is not an API envelope", payload=payload) from e


def parse_model(model: Type[ModelType], data: Any) -> ModelType:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ProtocolError(f"Unexpected {model.__name__} payload: {e.errors()[0]['msg']}", payload=data) from e


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Server message of an error response, if the body is an envelope."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return None
