"""
Test configuration and fixtures for the GalactaVista client.
Provides a recording mock transport, payload factories, and client/session fixtures.
"""

import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from galactavista.api.client import APIClient
from galactavista.repositories.credentials import InMemoryCredentialRepository
from galactavista.services.auth import AuthSessionManager
from galactavista.services.property import PropertyCollection
from galactavista.utils.auth import TokenHolder
from tests.fake_backend import create_fake_backend

API_PREFIX = "/api/v1"
BASE_URL = f"http://testserver{API_PREFIX}"

Handler = Callable[[httpx.Request], Any]


# Test data factories
class UserFactory:
    """Factory for server-side user payloads."""

    @staticmethod
    def create_user_payload(
        user_id: int = 1,
        email: str = "agent@example.com",
        first_name: str = "Alex",
        last_name: str = "Morgan",
        role: str = "agent",
        **overrides: Any
    ) -> Dict[str, Any]:
        data = {
            "id": user_id,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
            "phone": "",
            "avatar": "",
            "is_active": True,
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:00:00Z",
        }
        data.update(overrides)
        return data


class PropertyFactory:
    """Factory for property payloads and create requests."""

    @staticmethod
    def create_property_data(title: str = "Lakefront cabin", price: float = 350000, **overrides: Any) -> Dict[str, Any]:
        """Create-request data, as a UI form would send it."""
        data = {
            "title": title,
            "description": "Two-bedroom cabin on a quiet lake.",
            "price": price,
            "address": "12 Shore Rd",
            "city": "Lake Placid",
            "state": "NY",
            "zip_code": "12946",
            "country": "US",
            "property_type": "house",
            "bedrooms": 2,
            "bathrooms": 1.5,
            "square_feet": 1100,
            "year_built": 1978,
            "lot_size": 0.5,
            "features": ["dock", "fireplace"],
            "images": ["https://cdn.example.com/cabin-1.jpg"],
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_property_payload(property_id: int = 1, title: str = "Lakefront cabin", **overrides: Any) -> Dict[str, Any]:
        """Property as the server returns it."""
        data = PropertyFactory.create_property_data(title=title)
        data.update({
            "id": property_id,
            "status": "available",
            "vr_model_url": "",
            "agent": UserFactory.create_user_payload(),
            "created_at": "2024-02-01T10:00:00Z",
            "updated_at": "2024-02-01T10:00:00Z",
        })
        data.update(overrides)
        return data


def envelope(data: Any = None, success: bool = True, message: Optional[str] = None, error: Optional[str] = None) -> Dict[str, Any]:
    """Build a response envelope, omitting absent keys like the server does."""
    body: Dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


def page_payload(items: List[Dict[str, Any]], page: int = 1, page_size: int = 10,
                 total: Optional[int] = None, total_pages: int = 1) -> Dict[str, Any]:
    return {
        "page": page,
        "page_size": page_size,
        "total": len(items) if total is None else total,
        "total_pages": total_pages,
        "data": items,
    }


class MockBackend:
    """
    Routes requests by (method, path relative to the API prefix) and records them.

    A route is either a fixed (status, json) pair or a handler taking the
    request and returning an ``httpx.Response`` (sync or async).
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Union[Handler, Tuple[int, Any]]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json: Any = None,
            handler: Optional[Handler] = None) -> None:
        self.routes[(method.upper(), path)] = handler if handler is not None else (status, json)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]

        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"success": False, "error": f"No route {request.method} {path}"})

        if callable(route):
            response = route(request)
            if inspect.isawaitable(response):
                response = await response
            return response

        status, body = route
        return httpx.Response(status, json=body)


@pytest.fixture
def user_payload() -> Dict[str, Any]:
    return UserFactory.create_user_payload()


@pytest.fixture
def mock_backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def token_holder() -> TokenHolder:
    return TokenHolder()


@pytest.fixture
async def api_client(mock_backend: MockBackend, token_holder: TokenHolder):
    """API client whose transport is the recording mock backend."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(mock_backend))
    client = APIClient(base_url=BASE_URL, token_holder=token_holder, http_client=http)
    yield client
    await http.aclose()


@pytest.fixture
def credential_store() -> InMemoryCredentialRepository:
    return InMemoryCredentialRepository()


@pytest.fixture
def session_manager(api_client: APIClient, credential_store: InMemoryCredentialRepository) -> AuthSessionManager:
    return AuthSessionManager(api_client, credential_store)


@pytest.fixture
def property_collection(api_client: APIClient) -> PropertyCollection:
    return PropertyCollection(api_client)


# Fake backend fixtures
@pytest.fixture
def fake_backend():
    """In-memory FastAPI implementation of the server contract."""
    return create_fake_backend()


@pytest.fixture
async def backend_api(fake_backend):
    """API client talking to the fake backend through the ASGI transport."""
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=fake_backend))
    client = APIClient(base_url=BASE_URL, token_holder=TokenHolder(), http_client=http)
    yield client
    await http.aclose()
