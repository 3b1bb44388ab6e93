import abc
import logging
import typing as t


class AbstractExceptionMapper[K: Exception, V: Exception](abc.ABC):
    EXCEPTION_MAPPING: t.Mapping[type[K], type[V]]

    @classmethod
    @abc.abstractmethod
    def get_default_exc(cls) -> type[V]: ...

    @classmethod
    def map(cls, exc: K) -> type[V]:
        for exc_class in type(exc).__mro__:
            mapped_exc_class = cls.EXCEPTION_MAPPING.get(exc_class)  # type: ignore
            if mapped_exc_class:
                return mapped_exc_class
        logging.warning("Not mapped exception: %s", type(exc))
        return cls.get_default_exc()

    @classmethod
    def map_and_init(cls, exc: K) -> V:
        return cls.map(exc)(str(exc))  # type: ignore

    @classmethod
    def map_and_raise(cls, exc: K) -> t.NoReturn:
        raise cls.map_and_init(exc) from exc
