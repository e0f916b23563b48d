from abc import ABC, abstractmethod

from app.domain.entities.resource import Resource, ResourceType


class ResourceDirectoryPort(ABC):
    @abstractmethod
    def get_type_name(self, resource_type_id: int) -> str:
        """Human name for a resource type; unknown ids map to a generic name."""
        raise NotImplementedError

    @abstractmethod
    def list_resource_types(self) -> list[ResourceType]:
        raise NotImplementedError

    @abstractmethod
    def list_bookable_resources(self, resource_type_id: int) -> list[Resource]:
        """
        Bookable resources of one type, each carrying its booked slots.

        Order is the directory's native enumeration order (ascending id) and
        must be stable between calls.
        """
        raise NotImplementedError
