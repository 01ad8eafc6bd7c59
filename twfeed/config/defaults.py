"""Default configuration parameters for the streaming feed client."""

from dataclasses import dataclass, field


DEFAULT_EVENT_FIELDS: dict[str, tuple[str, ...]] = {
    "Quote": ("eventType", "eventSymbol", "bidPrice", "askPrice", "bidSize", "askSize"),
    "Trade": ("eventType", "eventSymbol", "price", "dayVolume", "size"),
    "Greeks": ("eventType", "eventSymbol", "volatility", "delta", "gamma", "theta", "rho", "vega"),
    "Summary": ("eventType", "eventSymbol", "openInterest", "dayOpenPrice", "dayHighPrice",
                "dayLowPrice", "prevDayClosePrice"),
    "Profile": ("eventType", "eventSymbol", "description", "tradingStatus", "highLimitPrice",
                "lowLimitPrice"),
    "TimeAndSale": ("eventType", "eventSymbol", "time", "price", "size", "aggressorSide"),
    "Candle": ("eventType", "eventSymbol", "time", "open", "high", "low", "close", "volume"),
}


@dataclass(frozen=True)
class ProtocolParams:
    """SETUP handshake parameters."""
    version: str = "0.1-twfeed"
    keepalive_timeout: int = 60                     # Seconds the server may stay silent
    accept_keepalive_timeout: int = 60              # Seconds we may stay silent
    auth_state_timeout: float = 2.0                 # Wait for a follow-up AUTH_STATE, seconds


@dataclass(frozen=True)
class FeedParams:
    """Feed service channel parameters."""
    service: str = "FEED"
    contract: str = "AUTO"
    channel: int = 1                                # Requested channel id
    aggregation_period: int = 10                    # acceptAggregationPeriod, seconds
    data_format: str = "COMPACT"
    event_fields: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_EVENT_FIELDS)
    )


@dataclass(frozen=True)
class SubscriptionParams:
    """Subscription batching and pacing parameters."""
    max_batch_size: int = 500                       # Symbols per FEED_SUBSCRIPTION message
    pacing: str = "token_bucket"                    # token_bucket | none
    batches_per_second: float = 5.0                 # Token refill rate
    burst: int = 1                                  # Token bucket capacity


@dataclass(frozen=True)
class TransportParams:
    """WebSocket transport parameters."""
    open_timeout: float = 10.0
    close_timeout: float = 5.0
    max_message_size: int = 4 * 1024 * 1024


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    protocol: ProtocolParams
    feed: FeedParams
    subscription: SubscriptionParams
    transport: TransportParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        protocol=ProtocolParams(),
        feed=FeedParams(),
        subscription=SubscriptionParams(),
        transport=TransportParams(),
    )
