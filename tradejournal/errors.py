"""Exception types raised by TradeJournal."""


class TradeJournalError(Exception):
    """Base class for all TradeJournal errors."""


class ConfigError(TradeJournalError):
    """Raised when the configuration file cannot be read."""


class TradeNotFoundError(TradeJournalError, KeyError):
    """Raised when a trade id does not exist for the user."""

    def __init__(self, trade_id: str):
        super().__init__(f"Trade not found: {trade_id}")
        self.trade_id = trade_id

    def __str__(self) -> str:
        return self.args[0]


class StrategyNotFoundError(TradeJournalError, KeyError):
    """Raised when a strategy id does not exist for the user."""

    def __init__(self, strategy_id: str):
        super().__init__(f"Strategy not found: {strategy_id}")
        self.strategy_id = strategy_id

    def __str__(self) -> str:
        return self.args[0]


class DuplicateIdError(TradeJournalError):
    """Raised when a record is created with an id the user already has."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} already exists: {record_id}")
        self.record_id = record_id
