import asyncio
import requests

from decimal import Decimal
from fogscale.errors import ScalerConfigError, ScalerError
from fogscale.scalers.base import MetricSpec, MetricTargetType, MetricValue, Scaler, ScalerConfig, normalize_string
from typing import List, Tuple
from urllib.parse import urlparse

def parse_stock_metadata(metadata) -> Tuple[str, int]:
    """Validates the `host` and `threshold` trigger metadata of a stock scaler."""

    threshold = 0
    if metadata.get("threshold"):
        try:
            threshold = int(metadata["threshold"])
        except ValueError as e:
            raise ScalerConfigError(f"threshold: error parsing threshold {e}") from e

    if "host" not in metadata:
        raise ScalerConfigError("no host URI given")

    host = metadata["host"]
    parsed = urlparse(host)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ScalerConfigError(f"invalid URL: {host!r}")

    return host, threshold

class StockScaler(Scaler):
    """
    Scales on the number of comments reported by a stock sentiment endpoint.
    The endpoint returns a JSON list whose first entry carries `no_of_comments`.
    """

    metric_name = "stock"

    def __init__(self, config: ScalerConfig):
        self.host, self.threshold = parse_stock_metadata(config.trigger_metadata)
        self.timeout = config.global_timeout
        self.session = requests.Session()

    async def is_active(self) -> bool:
        return await self._get_stock() > self.threshold

    def get_metric_spec_for_scaling(self) -> List[MetricSpec]:
        return [MetricSpec(
            name=normalize_string(self.metric_name),
            target_quantity=Decimal(self.threshold),
            target_type=MetricTargetType.AVERAGE_VALUE,
        )]

    async def get_metrics(self, metric_name: str) -> List[MetricValue]:
        comments = await self._get_stock()
        return [MetricValue(metric_name, Decimal(comments))]

    async def close(self) -> None:
        self.session.close()

    def _fetch(self):
        response = self.session.get(self.host, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def _get_stock(self) -> int:
        # requests is blocking, keep it off the event loop.
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, self._fetch)
        except (requests.RequestException, ValueError) as e:
            raise ScalerError(f"stock: error fetching {self.host}: {e}") from e

        try:
            return int(data[0]["no_of_comments"])
        except (IndexError, KeyError, TypeError, ValueError) as e:
            raise ScalerError(f"stock: unexpected response from {self.host}: {data!r}") from e
