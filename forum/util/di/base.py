"""Provider base class and component metadata."""

from typing import ClassVar, Literal, Type

from dishka import Provider

# Infrastructure components with a mock implementation for tests
Component = Literal["persistence", "cache", "messaging"]


class ProviderBase(Provider):
    """Base for every provider in the container.

    A provider class with no subclasses is used as-is. A provider class with
    subclasses names a swappable component: exactly one subclass is the
    production implementation and one (living under tests/) is the mock.

    Attributes:
        __mock_component__: Component a swappable base stands for
        __is_mock__: Set on the mock implementation
        __depends_on__: Components that must also be real when this one is
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
    __depends_on__: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def is_swappable(cls) -> bool:
        return bool(cls.__subclasses__())

    @classmethod
    def implementation(cls, use_mock: bool) -> Type["ProviderBase"]:
        """Pick the implementation to instantiate.

        Raises:
            ValueError: If the component has no implementation of that kind
        """
        if not cls.is_swappable():
            return cls

        for subclass in cls.__subclasses__():
            if subclass.__is_mock__ == use_mock:
                return subclass

        kind = "mock" if use_mock else "production"
        raise ValueError(
            f"No {kind} implementation for {cls.__mock_component__ or cls.__name__}"
        )
