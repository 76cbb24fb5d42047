"""Indicator instance service."""

import logging
from typing import TYPE_CHECKING, Iterable, List

from ....core.error_handling import inventory_error_handler
from ....core.exceptions import NotFoundError
from ...catalog.entities.enums import StaticProxyType
from ...resiloc_indicators.entities.protocols import ResilocIndicatorRepository
from ...resiloc_proxies.entities.protocols import ResilocProxyRepository
from ..entities.indicator import Indicator
from ..entities.protocols import IndicatorRepository

if TYPE_CHECKING:
    from ...static_proxies.services.static_proxy_service import StaticProxiesService

logger = logging.getLogger(__name__)


class IndicatorsService:
    """Instantiates indicator templates for scenario instances."""

    def __init__(
        self,
        repository: IndicatorRepository,
        resiloc_indicator_repository: ResilocIndicatorRepository,
        resiloc_proxy_repository: ResilocProxyRepository,
        static_proxies: "StaticProxiesService",
    ):
        self._repository = repository
        self._resiloc_indicators = resiloc_indicator_repository
        self._resiloc_proxies = resiloc_proxy_repository
        self._static_proxies = static_proxies

    @inventory_error_handler("create indicator")
    async def create(self, resiloc_indicator_id: str) -> Indicator:
        """One ``proxy_of_indicator`` instance per proxy of the template.

        Each static proxy takes the visibility of its own proxy template.
        """
        resiloc_indicator = await self._resiloc_indicators.get_by_id(resiloc_indicator_id)
        if resiloc_indicator is None:
            raise NotFoundError(f"Resiloc indicator {resiloc_indicator_id} does not exist")

        static_proxy_ids = []
        for resiloc_proxy in await self._resiloc_proxies.get_by_ids(resiloc_indicator.resiloc_proxy_ids):
            static_proxy = await self._static_proxies.create(
                resiloc_proxy.id, StaticProxyType.PROXY_OF_INDICATOR, resiloc_proxy.visibility
            )
            static_proxy_ids.append(static_proxy.id)

        indicator = Indicator(
            resiloc_indicator_id=resiloc_indicator.id,
            visibility=resiloc_indicator.visibility,
            static_proxy_ids=static_proxy_ids,
        )
        return await self._repository.create(indicator)

    async def get_by_ids(self, indicator_ids: Iterable[str]) -> List[Indicator]:
        return await self._repository.get_by_ids(list(indicator_ids))

    @inventory_error_handler("remove indicator")
    async def remove(self, indicator_id: str) -> bool:
        """Delete the instance together with its static proxies."""
        indicator = await self._repository.get_by_id(indicator_id)
        if indicator is None:
            raise NotFoundError(f"Indicator {indicator_id} does not exist")
        await self._static_proxies.remove_many(indicator.static_proxy_ids)
        deleted = await self._repository.delete(indicator_id)
        logger.info(f"Removed indicator {indicator_id} with {len(indicator.static_proxy_ids)} static proxies")
        return deleted

    async def is_resiloc_indicator_used(self, resiloc_indicator_id: str) -> bool:
        return await self._repository.exists_for_resiloc_indicator(resiloc_indicator_id)
