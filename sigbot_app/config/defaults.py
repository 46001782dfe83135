"""Default configuration parameters for the signal dispatch bot."""

from dataclasses import dataclass, field

TARGET_SYMBOLS = (
    "BTCUSDT", "ETHUSDT", "BNBUSDT", "SOLUSDT", "XRPUSDT",
    "ADAUSDT", "AVAXUSDT", "DOTUSDT", "LINKUSDT", "MATICUSDT",
    "LTCUSDT", "BCHUSDT", "ATOMUSDT", "ETCUSDT", "XLMUSDT",
    "FILUSDT", "ALGOUSDT", "NEARUSDT", "UNIUSDT", "DOGEUSDT",
    "ZECUSDT", "PEPEUSDT", "ZENUSDT", "HYPEUSDT", "WIFUSDT",
    "MEMEUSDT", "BOMEUSDT", "POPCATUSDT", "MYROUSDT", "DOGUSDT",
    "TOSHIUSDT", "MOGUSDT", "TURBOUSDT", "PEOPLEUSDT", "ARCUSDT",
    "DASHUSDT", "APTUSDT", "ARBUSDT", "OPUSDT", "SUIUSDT",
    "SEIUSDT", "TIAUSDT", "INJUSDT", "RNDRUSDT", "FETUSDT",
    "AGIXUSDT", "OCEANUSDT", "JASMYUSDT", "GALAUSDT", "SANDUSDT",
)


@dataclass(frozen=True)
class ScheduleParams:
    """Timer and operating window parameters."""
    interval_seconds: float = 5400.0                 # 1.5 hours between cycles
    start_delay_seconds: float = 10.0                # First cycle after startup
    timezone: str = "Asia/Ho_Chi_Minh"               # Reference zone for the window
    start_hour: int = 4                              # Window opens at start_hour:00
    end_hour: int = 23                               # Window closes at end_hour:end_minute
    end_minute: int = 30


@dataclass(frozen=True)
class FilterParams:
    """Signal eligibility parameters."""
    min_confidence: float = 60.0


@dataclass(frozen=True)
class DedupParams:
    """Duplicate suppression parameters."""
    window_seconds: int = 3600


@dataclass(frozen=True)
class BreakerParams:
    """Rate-limit circuit breaker parameters."""
    threshold: int = 5
    cooldown_seconds: float = 600.0


@dataclass(frozen=True)
class BroadcastParams:
    """Fan-out retry parameters."""
    max_attempts: int = 3
    backoff_seconds: float = 1.0                     # Linear: backoff * attempt
    inter_message_delay: float = 0.08                # Keeps within transport limits


@dataclass(frozen=True)
class PacingParams:
    """Politeness pacing between upstream calls."""
    between_evaluations: float = 3.0
    after_dispatch: float = 2.0
    progress_growth: float = 0.0                     # Extra fraction at end of universe
    jitter_seconds: float = 0.0


@dataclass(frozen=True)
class ManualParams:
    """Manual command parameters."""
    scan_delay_seconds: float = 1.2
    scan_result_limit: int = 20
    users_list_limit: int = 100


@dataclass(frozen=True)
class SourceParams:
    """A single HTTP signal source."""
    name: str = "ai-rsi"
    label: str = "AI TRADING V3/AI RSI"
    url: str = "http://127.0.0.1:8080/analyze"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class StorageParams:
    """Persistence parameters."""
    db_path: str = "sigbot.db"


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    schedule: ScheduleParams
    filter: FilterParams
    dedup: DedupParams
    breaker: BreakerParams
    broadcast: BroadcastParams
    pacing: PacingParams
    manual: ManualParams
    storage: StorageParams
    logging: LoggingParams
    symbols: tuple[str, ...] = TARGET_SYMBOLS
    sources: tuple[SourceParams, ...] = field(default_factory=lambda: (SourceParams(),))


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        schedule=ScheduleParams(),
        filter=FilterParams(),
        dedup=DedupParams(),
        breaker=BreakerParams(),
        broadcast=BroadcastParams(),
        pacing=PacingParams(),
        manual=ManualParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )
