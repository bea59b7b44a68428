"""SQLite document store for TradeJournal.

Trades and strategies are kept as JSON documents keyed by user and id,
the same shape a hosted document database would hold. Subscribers are
told about every change with a fresh snapshot of the user's trades.
"""

import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Callable, Optional

from tradejournal.errors import DuplicateIdError, StrategyNotFoundError, TradeNotFoundError
from tradejournal.models import Strategy, Trade, TradeStatistics

logger = logging.getLogger(__name__)

TradesCallback = Callable[[list[Trade]], None]
Unsubscribe = Callable[[], None]


class TradeStore:
    """SQLite-based trade and strategy store."""

    REQUIRED_TABLES = ["trades", "strategies"]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._subscribers: dict[str, list[TradesCallback]] = {}
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        user_id TEXT NOT NULL,
                        id TEXT NOT NULL,
                        doc TEXT NOT NULL,
                        UNIQUE(user_id, id)
                    )
                """)
            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Subscriptions ====================

    def subscribe(self, user_id: str, callback: TradesCallback) -> Unsubscribe:
        """Register a callback for changes to a user's trades.

        The callback receives the full trade list after every create,
        update or delete for that user, including strategy deletions
        that unlink trades.

        Args:
            user_id: Owner of the trades.
            callback: Called with the new snapshot.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.setdefault(user_id, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(user_id, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _notify(self, user_id: str) -> None:
        callbacks = list(self._subscribers.get(user_id, []))
        if not callbacks:
            return
        snapshot = self.list_trades(user_id)
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Trade subscriber failed for user %s", user_id)

    # ==================== Trades ====================

    def list_trades(self, user_id: str) -> list[Trade]:
        """Get all trades for a user, in creation order.

        Args:
            user_id: Owner of the trades.

        Returns:
            List of trades.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT doc FROM trades WHERE user_id = ? ORDER BY seq",
                (user_id,),
            )
            return [Trade.model_validate_json(row["doc"]) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_trade(self, user_id: str, trade_id: str) -> Trade:
        """Get a single trade.

        Raises:
            TradeNotFoundError: If the trade does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT doc FROM trades WHERE user_id = ? AND id = ?",
                (user_id, trade_id),
            )
            row = cursor.fetchone()
            if row is None:
                raise TradeNotFoundError(trade_id)
            return Trade.model_validate_json(row["doc"])
        finally:
            conn.close()

    def create_trade(self, user_id: str, trade: Trade) -> Trade:
        """Store a new trade, assigning an id if it has none.

        Returns:
            The stored trade.

        Raises:
            DuplicateIdError: If the user already has a trade with this id.
        """
        if trade.id is None:
            trade = trade.model_copy(update={"id": uuid.uuid4().hex})

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO trades (user_id, id, doc) VALUES (?, ?, ?)",
                    (user_id, trade.id, trade.model_dump_json()),
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateIdError("Trade", trade.id) from e
            conn.commit()
        finally:
            conn.close()

        logger.debug("Created trade %s (%s) for user %s", trade.id, trade.symbol, user_id)
        self._notify(user_id)
        return trade

    def update_trade(self, user_id: str, trade: Trade) -> Trade:
        """Replace a stored trade with a new version.

        Raises:
            TradeNotFoundError: If no trade with ``trade.id`` exists.
        """
        if trade.id is None:
            raise TradeNotFoundError("<none>")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE trades SET doc = ? WHERE user_id = ? AND id = ?",
                (trade.model_dump_json(), user_id, trade.id),
            )
            if cursor.rowcount == 0:
                raise TradeNotFoundError(trade.id)
            conn.commit()
        finally:
            conn.close()

        logger.debug("Updated trade %s for user %s", trade.id, user_id)
        self._notify(user_id)
        return trade

    def delete_trade(self, user_id: str, trade_id: str) -> None:
        """Delete a trade.

        Raises:
            TradeNotFoundError: If the trade does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE user_id = ? AND id = ?",
                (user_id, trade_id),
            )
            if cursor.rowcount == 0:
                raise TradeNotFoundError(trade_id)
            conn.commit()
        finally:
            conn.close()

        logger.debug("Deleted trade %s for user %s", trade_id, user_id)
        self._notify(user_id)

    # ==================== Strategies ====================

    def list_strategies(self, user_id: str) -> list[Strategy]:
        """Get all strategies for a user, in creation order."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT doc FROM strategies WHERE user_id = ? ORDER BY seq",
                (user_id,),
            )
            return [Strategy.model_validate_json(row["doc"]) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_strategy(self, user_id: str, strategy_id: str) -> Strategy:
        """Get a single strategy.

        Raises:
            StrategyNotFoundError: If the strategy does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT doc FROM strategies WHERE user_id = ? AND id = ?",
                (user_id, strategy_id),
            )
            row = cursor.fetchone()
            if row is None:
                raise StrategyNotFoundError(strategy_id)
            return Strategy.model_validate_json(row["doc"])
        finally:
            conn.close()

    def create_strategy(self, user_id: str, strategy: Strategy) -> Strategy:
        """Store a new strategy, assigning an id if it has none."""
        if strategy.id is None:
            strategy = strategy.model_copy(update={"id": uuid.uuid4().hex})

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO strategies (user_id, id, doc) VALUES (?, ?, ?)",
                    (user_id, strategy.id, strategy.model_dump_json()),
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateIdError("Strategy", strategy.id) from e
            conn.commit()
        finally:
            conn.close()

        logger.debug("Created strategy %s for user %s", strategy.id, user_id)
        return strategy

    def update_strategy(self, user_id: str, strategy: Strategy) -> Strategy:
        """Replace a stored strategy.

        Raises:
            StrategyNotFoundError: If no strategy with ``strategy.id`` exists.
        """
        if strategy.id is None:
            raise StrategyNotFoundError("<none>")

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE strategies SET doc = ? WHERE user_id = ? AND id = ?",
                (strategy.model_dump_json(), user_id, strategy.id),
            )
            if cursor.rowcount == 0:
                raise StrategyNotFoundError(strategy.id)
            conn.commit()
        finally:
            conn.close()
        return strategy

    def delete_strategy(self, user_id: str, strategy_id: str) -> int:
        """Delete a strategy and unlink its trades.

        Linked trades are kept; only their ``strategy_id`` is cleared.

        Returns:
            Number of trades that were unlinked.

        Raises:
            StrategyNotFoundError: If the strategy does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM strategies WHERE user_id = ? AND id = ?",
                (user_id, strategy_id),
            )
            if cursor.rowcount == 0:
                raise StrategyNotFoundError(strategy_id)

            cursor.execute(
                "SELECT id, doc FROM trades WHERE user_id = ? ORDER BY seq",
                (user_id,),
            )
            unlinked = 0
            for row in cursor.fetchall():
                trade = Trade.model_validate_json(row["doc"])
                if trade.strategy_id != strategy_id:
                    continue
                trade = trade.model_copy(update={"strategy_id": None})
                conn.execute(
                    "UPDATE trades SET doc = ? WHERE user_id = ? AND id = ?",
                    (trade.model_dump_json(), user_id, row["id"]),
                )
                unlinked += 1
            conn.commit()
        finally:
            conn.close()

        logger.debug(
            "Deleted strategy %s for user %s, unlinked %d trades",
            strategy_id,
            user_id,
            unlinked,
        )
        if unlinked:
            self._notify(user_id)
        return unlinked


def watch_statistics(
    store: TradeStore,
    user_id: str,
    callback: Callable[[TradeStatistics], None],
) -> Unsubscribe:
    """Recompute statistics whenever the user's trades change.

    The callback is invoked once straight away with the current snapshot
    and then after every change. Each call gets a freshly computed
    result; a consumer that falls behind can simply keep the latest one.

    Returns:
        A function that stops watching.
    """
    from tradejournal.stats import compute_statistics

    def on_snapshot(trades: list[Trade]) -> None:
        callback(compute_statistics(trades))

    unsubscribe = store.subscribe(user_id, on_snapshot)
    try:
        on_snapshot(store.list_trades(user_id))
    except Exception:
        unsubscribe()
        raise
    return unsubscribe
