"""Lazy loading for services that read a bundled YAML asset."""

from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class BaseDataService(ABC):
    """A service whose tables come from a data file read on first use.

    The taxonomy, the learning resource tables and the keyword tables all
    defer their file read until a lookup needs them. Subclasses set
    ``service_name`` and fill their tables in ``load()``, raising
    TaxonomyDataError when the asset does not validate.
    """

    service_name: str = ""
    _loaded: bool = False

    @abstractmethod
    def load(self) -> None:
        """Read the asset and install its tables. Runs at most once per instance on success."""

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        if self._loaded:
            return
        logger.info("Reading %s tables", self.service_name)
        self.load()
        self._loaded = True
        logger.debug("%s tables ready", self.service_name)
