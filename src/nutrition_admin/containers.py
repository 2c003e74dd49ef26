"""Dependency container wiring for the API and the client core."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

import httpx
from supabase import create_client

from nutrition_admin.adapters.nutrition_api_client import (
    HttpxNutritionApiClient,
    NutritionApi,
)
from nutrition_admin.adapters.supabase_category_repository import (
    SupabaseCategoryRepository,
)
from nutrition_admin.adapters.supabase_food_repository import SupabaseFoodRepository
from nutrition_admin.adapters.supabase_meal_repository import SupabaseMealRepository
from nutrition_admin.adapters.supabase_serving_unit_repository import (
    SupabaseServingUnitRepository,
)
from nutrition_admin.app_logging import configure_logging
from nutrition_admin.client.confirmation import AlertDialogRenderer, ConfirmationChannel
from nutrition_admin.client.notifications import Notifier
from nutrition_admin.client.queries import QueryClient
from nutrition_admin.client.store import JsonFileStorage, StateStorage, StoreRegistry
from nutrition_admin.client.stores import ClientStores, create_client_stores
from nutrition_admin.config import Settings
from nutrition_admin.domain.models import SessionUser
from nutrition_admin.services.categories import CategoryService
from nutrition_admin.services.foods import FoodService
from nutrition_admin.services.meals import MealService
from nutrition_admin.services.serving_units import ServingUnitService


@dataclass
class AppContainer:
    """Holds API-wide dependencies."""

    settings: Settings
    category_service: CategoryService
    serving_unit_service: ServingUnitService
    food_service: FoodService
    meal_service: MealService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        category_service=CategoryService(SupabaseCategoryRepository(supabase_client)),
        serving_unit_service=ServingUnitService(
            SupabaseServingUnitRepository(supabase_client)
        ),
        food_service=FoodService(SupabaseFoodRepository(supabase_client)),
        meal_service=MealService(SupabaseMealRepository(supabase_client)),
        close_resources=close_resources,
    )


@dataclass
class ClientContainer:
    """Holds one client session: data source, cache, stores and channels."""

    settings: Settings
    api: NutritionApi
    query_client: QueryClient
    notifier: Notifier
    registry: StoreRegistry
    stores: ClientStores
    confirmation: ConfirmationChannel
    alert_renderer: AlertDialogRenderer
    user: SessionUser | None
    close_resources: Callable[[], Awaitable[None]]


def build_client(  # noqa: PLR0913
    settings: Settings | None = None,
    *,
    user: SessionUser | None = None,
    storage: StateStorage | None = None,
    api: NutritionApi | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ClientContainer:
    """Create a client session talking to the configured API."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    api_client = api or HttpxNutritionApiClient.create(
        resolved_settings.api_base_url,
        resolved_settings.admin_token,
        user=user,
        transport=transport,
    )
    registry = StoreRegistry()
    stores = create_client_stores(
        storage or JsonFileStorage(Path(resolved_settings.state_dir)), registry
    )

    async def close_resources() -> None:
        close = getattr(api_client, "close", None)
        if close is not None:
            await close()

    return ClientContainer(
        settings=resolved_settings,
        api=api_client,
        query_client=QueryClient(
            ttl_seconds=resolved_settings.query_cache_ttl_seconds,
            max_entries=resolved_settings.query_cache_max_entries,
        ),
        notifier=Notifier(),
        registry=registry,
        stores=stores,
        confirmation=ConfirmationChannel(stores.global_store),
        alert_renderer=AlertDialogRenderer(stores.global_store),
        user=user,
        close_resources=close_resources,
    )
