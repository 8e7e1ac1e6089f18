from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
import pytest
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from catalog_console.container import Container
from catalog_console.core.config import Settings
from catalog_console.infrastructure.local_storage import InMemoryLocalStorage

BACKEND_URL = "http://backend.test"
TOKEN_SECRET = "fake-backend-secret"


def _b64_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def make_token(claims: dict[str, Any], secret: str = TOKEN_SECRET) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    encoded_header = _b64_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    encoded_payload = _b64_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{encoded_header}.{encoded_payload}".encode("ascii")
    signature = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{encoded_header}.{encoded_payload}.{_b64_encode(signature)}"


def admin_claims(**overrides: Any) -> dict[str, Any]:
    now = int(time.time())
    claims: dict[str, Any] = {
        "id": "adm_1",
        "username": "admin",
        "isSuperadmin": True,
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return claims


class _BackendError(Exception):
    def __init__(self, status: int, message: Any) -> None:
        super().__init__(str(message))
        self.status = status
        self.message = message


class _LoginBody(BaseModel):
    username: str
    password: str


@dataclass
class FakeBackend:
    admins: dict[str, dict[str, Any]] = field(default_factory=dict)
    tokens: dict[str, dict[str, Any]] = field(default_factory=dict)
    products: dict[str, dict[str, Any]] = field(default_factory=dict)
    categories: dict[str, dict[str, Any]] = field(default_factory=dict)
    subcategories: dict[str, dict[str, Any]] = field(default_factory=dict)
    units: dict[str, dict[str, Any]] = field(default_factory=dict)
    countries: dict[str, dict[str, Any]] = field(default_factory=dict)
    carousel: dict[str, dict[str, Any]] = field(default_factory=dict)
    requests: list[dict[str, Any]] = field(default_factory=list)
    order_payloads: list[dict[str, Any]] = field(default_factory=list)
    upload_failure: tuple[int, Any] | None = None
    order_failure: tuple[int, Any] | None = None
    currency_available: bool = True
    counter: int = 0

    def next_id(self, prefix: str) -> str:
        self.counter += 1
        return f"{prefix}_{self.counter}"

    def issue_token(self, admin: dict[str, Any]) -> str:
        claims = admin_claims(
            id=admin["id"],
            username=admin["username"],
            isSuperadmin=admin["isSuperadmin"],
        )
        token = make_token(claims)
        self.tokens[token] = claims
        return token

    def revoke_all_tokens(self) -> None:
        self.tokens.clear()

    def calls(self, method: str, path_prefix: str) -> list[dict[str, Any]]:
        return [
            row for row in self.requests if row["method"] == method and row["path"].startswith(path_prefix)
        ]


def build_app(backend: FakeBackend) -> FastAPI:
    app = FastAPI()

    @app.exception_handler(_BackendError)
    async def _backend_error(_: Request, exc: _BackendError) -> JSONResponse:
        return JSONResponse(status_code=exc.status, content={"message": exc.message, "statusCode": exc.status})

    @app.middleware("http")
    async def _record(request: Request, call_next: Callable[..., Any]) -> Any:
        backend.requests.append(
            {
                "method": request.method,
                "path": request.url.path,
                "authorization": request.headers.get("authorization"),
            }
        )
        return await call_next(request)

    def require_admin(request: Request) -> dict[str, Any]:
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() != "bearer" or token not in backend.tokens:
            raise _BackendError(401, "Unauthorized")
        return backend.tokens[token]

    def require_superadmin(claims: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        if not claims.get("isSuperadmin"):
            raise _BackendError(403, "Forbidden resource")
        return claims

    def product_or_404(product_id: str) -> dict[str, Any]:
        product = backend.products.get(product_id)
        if product is None or product.get("isDeleted"):
            raise _BackendError(404, "Product not found")
        return product

    @app.post("/admin/login")
    def login(body: _LoginBody) -> dict[str, Any]:
        admin = backend.admins.get(body.username)
        if admin is None or admin["password"] != body.password:
            raise _BackendError(401, "Invalid credentials")
        return {"accessToken": backend.issue_token(admin)}

    @app.get("/admin")
    def list_admins(_: dict[str, Any] = Depends(require_superadmin)) -> list[dict[str, Any]]:
        return [
            {key: value for key, value in admin.items() if key != "password"}
            for admin in backend.admins.values()
        ]

    @app.get("/products/category/{category_id}")
    def products_by_category(category_id: str, _: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return [
            row
            for row in backend.products.values()
            if row.get("categoryId") == category_id and not row.get("isDeleted")
        ]

    @app.get("/products")
    def list_products(_: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return [row for row in backend.products.values() if not row.get("isDeleted")]

    @app.get("/products/{product_id}")
    def get_product(product_id: str, _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        return product_or_404(product_id)

    def validate_product(body: dict[str, Any], *, partial: bool) -> None:
        errors: list[str] = []
        if not partial or "name_uz" in body:
            if not str(body.get("name_uz") or "").strip():
                errors.append("name_uz should not be empty")
        if not partial or "price" in body:
            price = body.get("price")
            if not isinstance(price, (int, float)) or price < 0:
                errors.append("price must not be less than 0")
        if not partial and not body.get("categoryId"):
            errors.append("categoryId should not be empty")
        if errors:
            raise _BackendError(400, errors)

    @app.post("/products", status_code=201)
    def create_product(body: dict[str, Any], _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        validate_product(body, partial=False)
        product_id = backend.next_id("prod")
        product = {**body, "id": product_id, "files": [], "isDeleted": False}
        backend.products[product_id] = product
        return product

    @app.patch("/products/{product_id}")
    def update_product(
        product_id: str,
        body: dict[str, Any],
        _: dict[str, Any] = Depends(require_admin),
    ) -> dict[str, Any]:
        product = product_or_404(product_id)
        validate_product(body, partial=True)
        product.update({key: value for key, value in body.items() if key not in {"id", "files"}})
        return product

    @app.delete("/products/{product_id}")
    def delete_product(product_id: str, _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        product_or_404(product_id)["isDeleted"] = True
        return {"message": "Product deleted"}

    @app.post("/products/{product_id}/files", status_code=201)
    async def add_file(
        product_id: str,
        isVideo: str = "false",
        file: UploadFile = File(...),
        _: dict[str, Any] = Depends(require_admin),
    ) -> dict[str, Any]:
        product = product_or_404(product_id)
        if backend.upload_failure is not None:
            status, message = backend.upload_failure
            raise _BackendError(status, message)
        await file.read()
        row = {
            "id": backend.next_id("file"),
            "url": f"/uploads/{file.filename}",
            "isVideo": isVideo == "true",
            "productId": product_id,
        }
        product["files"].append(row)
        return row

    @app.delete("/products/{product_id}/files/{file_id}")
    def remove_file(product_id: str, file_id: str, _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        product = product_or_404(product_id)
        product["files"] = [row for row in product["files"] if row["id"] != file_id]
        return {"message": "File removed"}

    @app.patch("/products/{product_id}/files/order")
    def update_order(
        product_id: str,
        body: dict[str, Any],
        _: dict[str, Any] = Depends(require_admin),
    ) -> dict[str, Any]:
        product = product_or_404(product_id)
        if backend.order_failure is not None:
            status, message = backend.order_failure
            raise _BackendError(status, message)
        entries = body.get("files") or []
        known = {row["id"]: row for row in product["files"]}
        unknown = [entry["fileId"] for entry in entries if entry["fileId"] not in known]
        if unknown:
            raise _BackendError(400, [f"Unknown file id {file_id}" for file_id in unknown])
        backend.order_payloads.append(body)
        ordered = sorted(entries, key=lambda entry: entry["order"])
        listed = [known[entry["fileId"]] for entry in ordered]
        rest = [row for row in product["files"] if row["id"] not in {entry["fileId"] for entry in entries}]
        product["files"] = listed + rest
        return {"message": "File order updated"}

    @app.get("/categories")
    def list_categories(_: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return list(backend.categories.values())

    @app.post("/categories", status_code=201)
    async def create_category(
        name_uz: str = Form(""),
        name_en: str = Form(""),
        name_ru: str = Form(""),
        name_kz: str = Form(""),
        image: UploadFile | None = File(None),
        _: dict[str, Any] = Depends(require_admin),
    ) -> dict[str, Any]:
        if not name_uz.strip():
            raise _BackendError(400, ["name_uz should not be empty"])
        category_id = backend.next_id("cat")
        row = {
            "id": category_id,
            "name_uz": name_uz,
            "name_en": name_en,
            "name_ru": name_ru,
            "name_kz": name_kz,
            "image": f"/uploads/{image.filename}" if image is not None else "",
        }
        backend.categories[category_id] = row
        return row

    @app.delete("/categories/{category_id}")
    def delete_category(category_id: str, _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        if backend.categories.pop(category_id, None) is None:
            raise _BackendError(404, "Category not found")
        return {"message": "Category deleted"}

    @app.get("/subcategories")
    def list_subcategories(_: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return list(backend.subcategories.values())

    @app.post("/subcategories", status_code=201)
    def create_subcategory(body: dict[str, Any], _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        if body.get("categoryId") not in backend.categories:
            raise _BackendError(400, ["categoryId must reference an existing category"])
        subcategory_id = backend.next_id("sub")
        row = {**body, "id": subcategory_id}
        backend.subcategories[subcategory_id] = row
        return row

    @app.get("/units")
    def list_units(_: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return list(backend.units.values())

    @app.post("/units", status_code=201)
    def create_unit(body: dict[str, Any], _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        unit_id = backend.next_id("unit")
        backend.units[unit_id] = {"id": unit_id, "name": body["name"]}
        return backend.units[unit_id]

    @app.patch("/units/{unit_id}")
    def update_unit(unit_id: str, body: dict[str, Any], _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        if unit_id not in backend.units:
            raise _BackendError(404, "Unit not found")
        backend.units[unit_id]["name"] = body["name"]
        return backend.units[unit_id]

    @app.get("/countries")
    def list_countries(_: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return list(backend.countries.values())

    @app.post("/countries", status_code=201)
    def create_country(body: dict[str, Any], _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        country_id = backend.next_id("country")
        backend.countries[country_id] = {"id": country_id, "name": body["name"]}
        return backend.countries[country_id]

    @app.get("/carousel")
    def list_carousel(_: dict[str, Any] = Depends(require_admin)) -> list[dict[str, Any]]:
        return list(backend.carousel.values())

    @app.post("/carousel", status_code=201)
    async def add_carousel(file: UploadFile = File(...), _: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        item_id = backend.next_id("slide")
        backend.carousel[item_id] = {"id": item_id, "file": f"/uploads/{file.filename}"}
        return backend.carousel[item_id]

    @app.get("/currency")
    def currency(_: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
        if not backend.currency_available:
            raise _BackendError(503, "Currency service unavailable")
        return {"buy": 12650.0, "sell": 12720.0}

    return app


@pytest.fixture
def token_factory() -> Callable[..., str]:
    def factory(**claim_overrides: Any) -> str:
        return make_token(admin_claims(**claim_overrides))

    return factory


@pytest.fixture
def backend() -> FakeBackend:
    state = FakeBackend()
    state.admins["admin"] = {
        "id": "adm_1",
        "name": "Root Admin",
        "username": "admin",
        "password": "secret-pass",
        "isSuperadmin": True,
    }
    state.admins["editor"] = {
        "id": "adm_2",
        "name": "Catalog Editor",
        "username": "editor",
        "password": "editor-pass",
        "isSuperadmin": False,
    }
    state.categories["cat_seed"] = {"id": "cat_seed", "name_uz": "Urug'lar", "name_en": "Seeds", "image": ""}
    state.subcategories["sub_seed"] = {"id": "sub_seed", "name_uz": "Bug'doy", "categoryId": "cat_seed"}
    return state


@pytest.fixture
def make_container(backend: FakeBackend) -> Callable[..., Container]:
    """Builds a container wired to the fake backend; call inside the event loop."""
    app = build_app(backend)

    def factory(storage: InMemoryLocalStorage | None = None, **settings_overrides: Any) -> Container:
        settings = Settings(api_base_url=BACKEND_URL).with_overrides(**settings_overrides)
        return Container(
            settings,
            storage=storage if storage is not None else InMemoryLocalStorage(),
            transport=httpx.ASGITransport(app=app),
        )

    return factory
