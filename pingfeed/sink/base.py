# pingfeed/sink/base.py
from abc import ABC, abstractmethod

from pingfeed.schemas import ProbeResult


class Sink(ABC):
    @abstractmethod
    def write(self, record: ProbeResult) -> None:
        """Record one ProbeResult.

        Raise SinkWriteError if it could not be stored. The interpreter also
        survives other exceptions, but logs them as unexpected with a traceback.
        """
        raise NotImplementedError
