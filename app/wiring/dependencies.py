from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.booking_api import BookingApiPort
from app.application.ports.navigator import NavigatorPort
from app.application.ports.notifier import NotifierPort
from app.application.ports.service_api import ServiceApiPort
from app.application.ports.token_store import TokenStorePort
from app.application.use_cases.booking_coordinator import BookingCoordinator
from app.infrastructure.auth.token_store import JsonTokenStore
from app.infrastructure.http.api_client import ApiClient
from app.infrastructure.http.booking_api import HttpBookingApi
from app.infrastructure.http.service_api import HttpServiceApi
from app.infrastructure.mock.mock_booking_api import MockBookingApi
from app.infrastructure.mock.mock_service_api import MockServiceApi
from app.infrastructure.navigation.memory_navigator import MemoryNavigator
from app.infrastructure.notify.notifiers import LoggingNotifier


@lru_cache
def get_token_store() -> TokenStorePort:
    return JsonTokenStore(path=settings.TOKEN_STORE_PATH, key=settings.AUTH_TOKEN_KEY)


@lru_cache
def get_api_client() -> ApiClient:
    return ApiClient(
        base_url=settings.API_BASE_URL,
        token_store=get_token_store(),
        timeout=settings.API_TIMEOUT_SECONDS,
        retry_attempts=settings.API_RETRY_ATTEMPTS,
        retry_delay=settings.API_RETRY_DELAY_SECONDS,
    )


@lru_cache
def get_mock_service_api() -> MockServiceApi:
    return MockServiceApi()


def get_service_api() -> ServiceApiPort:
    if settings.USE_MOCK_API:
        return get_mock_service_api()
    return HttpServiceApi(client=get_api_client())


@lru_cache
def get_booking_api() -> BookingApiPort:
    logger = logging.getLogger(__name__)
    if settings.USE_MOCK_API:
        logger.info("Using MockBookingApi (USE_MOCK_API=true)")
        return MockBookingApi(services=get_mock_service_api())
    logger.info("Using HttpBookingApi", extra={"endpoint": settings.API_BASE_URL})
    return HttpBookingApi(client=get_api_client())


def get_notifier() -> NotifierPort:
    return LoggingNotifier()


def get_navigator() -> NavigatorPort:
    return MemoryNavigator()


def get_booking_coordinator(
    notifier: NotifierPort | None = None,
    navigator: NavigatorPort | None = None,
) -> BookingCoordinator:
    return BookingCoordinator(
        api=get_booking_api(),
        notifier=notifier or get_notifier(),
        navigator=navigator or get_navigator(),
        max_retries=settings.EXECUTOR_MAX_RETRIES,
        bookings_route=settings.BOOKINGS_ROUTE,
    )


def get_container(
    notifier: NotifierPort | None = None,
    navigator: NavigatorPort | None = None,
) -> dict[str, object]:
    return {
        "coordinator": get_booking_coordinator(notifier=notifier, navigator=navigator),
        "services": get_service_api(),
    }
