# pingfeed/sink/influx.py
import time

from influxdb import InfluxDBClient
from influxdb.exceptions import InfluxDBClientError, InfluxDBServerError
from loguru import logger
from requests.exceptions import RequestException

from pingfeed.config import InfluxSettings
from pingfeed.errors import SinkSetupError, SinkWriteError
from pingfeed.schemas import ProbeResult
from pingfeed.sink.base import Sink

CLIENT_ERRORS = (InfluxDBClientError, InfluxDBServerError, RequestException)


class InfluxSink(Sink):
    """
    Writes each ProbeResult as one point of the "ping" measurement, tagged
    with rx_host (destination) and tx_host (this machine). Loss is always
    written; min/avg/max only when fping reported them.
    """

    def __init__(self, client: InfluxDBClient, db: str, policy: str = ""):
        self.client = client
        self.db = db
        self.policy = policy

    @classmethod
    def connect(cls, settings: InfluxSettings, client_factory=InfluxDBClient) -> "InfluxSink":
        """Build the client, check the server answers and make sure the database exists."""
        client = client_factory(
            host=settings.host,
            port=settings.port,
            username=settings.user,
            password=settings.password,
            database=settings.db,
            ssl=settings.secure,
            verify_ssl=settings.secure,
        )
        scheme = "https" if settings.secure else "http"
        url = f"{scheme}://{settings.host}:{settings.port}"

        try:
            started = time.monotonic()
            version = client.ping()
            logger.info("Pinged InfluxDB at {} (version {}) in {:.3f}s",
                        url, version, time.monotonic() - started)

            databases = {d.get("name") for d in client.get_list_database()}
            if settings.db not in databases:
                client.create_database(settings.db)
                logger.info("Created new database {}", settings.db)
        except CLIENT_ERRORS as e:
            raise SinkSetupError(f"unable to set up InfluxDB at {url}: {e}") from e

        return cls(client, settings.db, settings.policy)

    def write(self, record: ProbeResult) -> None:
        try:
            self.client.write_points(
                [record.to_point()],
                time_precision="s",
                database=self.db,
                retention_policy=self.policy or None,
            )
        except CLIENT_ERRORS as e:
            raise SinkWriteError(str(e)) from e
