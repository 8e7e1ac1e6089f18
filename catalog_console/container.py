from __future__ import annotations

import httpx

from catalog_console.core.config import Settings
from catalog_console.infrastructure.api_client import ApiClient
from catalog_console.infrastructure.local_storage import FileLocalStorage, LocalStorage
from catalog_console.infrastructure.token_store import TokenStore
from catalog_console.orchestrator.product_save import ProductSaveOrchestrator
from catalog_console.services.admin_service import AdminService
from catalog_console.services.carousel_service import CarouselService
from catalog_console.services.category_service import CategoryService, SubcategoryService
from catalog_console.services.country_service import CountryService
from catalog_console.services.dashboard_service import DashboardService
from catalog_console.services.product_service import ProductService
from catalog_console.services.session_service import SessionManager
from catalog_console.services.unit_service import UnitService


class Container:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        storage: LocalStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.storage = storage or FileLocalStorage(self.settings.resolved_storage_path)
        self.token_store = TokenStore(self.storage)
        self.api_client = ApiClient(
            settings=self.settings,
            token_store=self.token_store,
            transport=transport,
        )
        self.session_manager = SessionManager(
            settings=self.settings,
            api_client=self.api_client,
            token_store=self.token_store,
        )

        self.product_service = ProductService(self.api_client)
        self.category_service = CategoryService(self.api_client)
        self.subcategory_service = SubcategoryService(self.api_client)
        self.unit_service = UnitService(self.api_client)
        self.country_service = CountryService(self.api_client)
        self.carousel_service = CarouselService(self.api_client)
        self.dashboard_service = DashboardService(self.api_client)
        self.admin_service = AdminService(self.api_client, self.session_manager)

        self.product_save = ProductSaveOrchestrator(
            settings=self.settings,
            product_service=self.product_service,
            category_service=self.category_service,
            subcategory_service=self.subcategory_service,
            dashboard_service=self.dashboard_service,
        )

    async def aclose(self) -> None:
        await self.api_client.aclose()
