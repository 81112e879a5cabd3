import logging
from abc import ABC, abstractmethod
from uuid import uuid4

from .core import Container

logger = logging.getLogger(__name__)


class BaseBundle(ABC):
    """A reusable group of registrations, applied with ``Container.apply_bundle``."""

    @abstractmethod
    def apply(self, container: Container): ...

    def __call__(self, container: Container):
        self.apply(container=container)


class RunOnceBundle(BaseBundle):
    @abstractmethod
    def apply(self, container: Container): ...

    @abstractmethod
    def get_bundle_identifier(self) -> str: ...

    def __call__(self, container: Container):
        bundle_identifier = self.get_bundle_identifier()

        if container.has_applied_bundle(bundle_identifier):
            logger.debug("Bundle %s attempted to run more than once on container %s", bundle_identifier, container.id)
            return

        self.apply(container=container)
        container.mark_bundle_applied(bundle_identifier)


class OnlyRunOncePerInstanceBundle(RunOnceBundle):
    def __new__(cls, *args, **kwargs):
        instance = super().__new__(cls)
        instance._instance_id = str(uuid4())  # type: ignore
        return instance

    def get_bundle_identifier(self) -> str:
        module = self.__class__.__module__
        class_name = self.__class__.__name__
        return f"{module}.{class_name}-{self._instance_id}"  # type: ignore


class OnlyRunOncePerClassBundle(RunOnceBundle):
    def get_bundle_identifier(self) -> str:
        module = self.__class__.__module__
        class_name = self.__class__.__name__
        return f"{module}.{class_name}"
