"""Neo4j graph sink implementation.

This module implements the GraphSink protocol on top of the official neo4j
Python driver. Every call chain is written inside one explicit write
transaction:
- Function nodes are merged on (name, receiver, package)
- CALLS relationships are merged between the matched nodes

Transient driver failures are retried with exponential backoff before the
error is surfaced as a SinkWriteError. Explicit transactions are not retried
by the driver itself, so RetryConfig alone bounds the number of attempts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from neo4j import Driver, GraphDatabase, Transaction
from neo4j.exceptions import (
    DriverError,
    Neo4jError,
    ServiceUnavailable,
    SessionExpired,
    TransientError,
)

from ...models.graph import CallChain, EdgeUpsert, NodeUpsert
from ...utils.errors import SinkWriteError
from ...utils.logging import LogEventNames
from ...utils.retry import create_retry

if TYPE_CHECKING:
    from ...config.schema import Neo4jConfig, RetryConfig

log = structlog.get_logger()

NODE_QUERY = """
MERGE (f:Function {name: $name, receiver: $receiver, package: $package})
SET f += $properties
"""

EDGE_QUERY = """
MATCH (caller:Function {name: $caller_name, receiver: $caller_receiver, package: $caller_package})
MATCH (callee:Function {name: $callee_name, receiver: $callee_receiver, package: $callee_package})
MERGE (caller)-[:CALLS]->(callee)
"""

CONSTRAINT_QUERY = """
CREATE CONSTRAINT function_identity IF NOT EXISTS
FOR (f:Function) REQUIRE (f.name, f.receiver, f.package) IS NODE KEY
"""

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    ServiceUnavailable,
    SessionExpired,
    TransientError,
)


def _apply_chain(tx: Transaction, chain: CallChain) -> None:
    """Run every operation of a chain inside one transaction."""
    for operation in chain.operations:
        if isinstance(operation, NodeUpsert):
            params: dict[str, Any] = operation.identity.as_params()
            params["properties"] = dict(operation.properties)
            tx.run(NODE_QUERY, params).consume()
        elif isinstance(operation, EdgeUpsert):
            params = {
                **operation.caller.as_params("caller_"),
                **operation.callee.as_params("callee_"),
            }
            tx.run(EDGE_QUERY, params).consume()


class Neo4jGraphSink:
    """Neo4j implementation of the GraphSink protocol.

    Example:
        sink = Neo4jGraphSink.from_config(config.sink.neo4j, config.retry)
        sink.write_chain(chain)
        sink.close()
    """

    def __init__(
        self,
        driver: Driver,
        database: str = "neo4j",
        max_attempts: int = 3,
        min_wait: float = 1.0,
        max_wait: float = 30.0,
    ) -> None:
        """Initialize the sink with an existing driver.

        Args:
            driver: Neo4j driver; the sink takes ownership and closes it
            database: Database name to write to
            max_attempts: Attempts for transient failures
            min_wait: Minimum backoff between attempts (seconds)
            max_wait: Maximum backoff between attempts (seconds)
        """
        self._driver = driver
        self._database = database
        self._closed = False
        self._write_with_retry = create_retry(
            max_attempts=max_attempts,
            min_wait=min_wait,
            max_wait=max_wait,
            retry_on=TRANSIENT_ERRORS,
        )(self._write)

    @classmethod
    def from_credentials(
        cls,
        uri: str,
        username: str,
        password: str,
        database: str = "neo4j",
        **kwargs: Any,
    ) -> Neo4jGraphSink:
        """Create a sink with a new driver for the given server."""
        driver = GraphDatabase.driver(uri, auth=(username, password))
        return cls(driver, database=database, **kwargs)

    @classmethod
    def from_config(
        cls,
        config: Neo4jConfig,
        retry: RetryConfig | None = None,
    ) -> Neo4jGraphSink:
        """Create a sink from configuration."""
        driver = GraphDatabase.driver(
            config.uri,
            auth=(config.username, config.password),
            connection_timeout=config.connection_timeout,
        )
        if retry is None:
            return cls(driver, database=config.database)
        return cls(
            driver,
            database=config.database,
            max_attempts=retry.max_attempts,
            min_wait=retry.initial_delay,
            max_wait=retry.max_delay,
        )

    @property
    def database(self) -> str:
        """Name of the database written to."""
        return self._database

    def _write(self, chain: CallChain) -> None:
        with self._driver.session(database=self._database) as session:
            with session.begin_transaction() as tx:
                _apply_chain(tx, chain)
                tx.commit()

    def write_chain(self, chain: CallChain) -> None:
        """Write a call chain in one transaction.

        Args:
            chain: Ordered node and edge upserts

        Raises:
            SinkWriteError: If the sink is closed or the transaction fails
        """
        if self._closed:
            raise SinkWriteError("Neo4j sink is closed", operations=len(chain))

        log.debug(
            LogEventNames.SINK_WRITE_START,
            database=self._database,
            nodes=len(chain.nodes),
            edges=len(chain.edges),
        )

        try:
            self._write_with_retry(chain)
        except (Neo4jError, DriverError) as e:
            log.error(LogEventNames.SINK_WRITE_ERROR, database=self._database, error=str(e))
            raise SinkWriteError(
                f"Failed to execute write transaction: {e}",
                operations=len(chain),
            ) from e

        log.debug(LogEventNames.SINK_WRITE_COMPLETE, database=self._database)

    def ensure_constraints(self) -> None:
        """Create the node key constraint used by MERGE, if missing.

        NODE KEY constraints require Neo4j Enterprise Edition.

        Raises:
            SinkWriteError: If the constraint cannot be created
        """
        try:
            with self._driver.session(database=self._database) as session:
                session.run(CONSTRAINT_QUERY).consume()
        except (Neo4jError, DriverError) as e:
            raise SinkWriteError(f"Failed to create constraints: {e}") from e

    def verify_connectivity(self) -> None:
        """Check that the server is reachable.

        Raises:
            SinkWriteError: If the server cannot be reached
        """
        try:
            self._driver.verify_connectivity()
        except (Neo4jError, DriverError) as e:
            raise SinkWriteError(f"Neo4j is not reachable: {e}") from e

    def close(self) -> None:
        """Close the underlying driver."""
        if self._closed:
            return
        self._closed = True
        self._driver.close()
        log.info(LogEventNames.SINK_CLOSED, sink="neo4j")
