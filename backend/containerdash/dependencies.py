from functools import lru_cache
import logging

from containerdash.config import get_settings
from containerdash.services.cadvisor import RemoteManager
from containerdash.services.demo import build_demo_manager
from containerdash.services.manager import ContainerManager
from containerdash.services.page import PageAssembler


logger = logging.getLogger(__name__)


@lru_cache
def get_container_manager() -> ContainerManager:
    settings = get_settings()
    if settings.enable_mock_data:
        logger.info("Serving built-in demo containers")
        return build_demo_manager(settings.num_stats)
    return RemoteManager(settings)


@lru_cache
def get_page_assembler() -> PageAssembler:
    return PageAssembler(get_container_manager(), get_settings())
