# src/szoracle/oracle/driver.py
"""OracleDriver: runs generated cases against an engine and keeps score.

Every case is run twice, once addressing entities by record key and once
by entity id, because the engine exposes both forms and they must agree.

Failure handling:
- perform() counts the failure, logs it and re-raises
- with fast_fail set, it logs, waits for the grace period so buffered
  output can flush, and terminates the run with exit status 1
- run_suite() records each failure and moves on to the next case
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from szoracle.contracts.errors import OracleAssertionError
from szoracle.contracts.expectations import ExpectedNetworkSpec, ExpectedPathSpec, OracleCase
from szoracle.core.canonical import stable_hash
from szoracle.core.config import OracleSettings
from szoracle.core.logging import bound_case, get_logger
from szoracle.core.lookup import RecordEntityLookup
from szoracle.oracle.network import validate_network
from szoracle.oracle.path import validate_path
from szoracle.sdk.errors import SzError, error_code_of
from szoracle.sdk.protocols import SzEngine

logger = get_logger(__name__)


@dataclass(slots=True)
class OracleCounts:
    """Running success / failure tally."""

    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def __str__(self) -> str:
        return f"{self.succeeded} (succeeded) / {self.failed} (failed)"


@dataclass(frozen=True, slots=True)
class CaseFailure:
    """A failed case run, as recorded by run_suite()."""

    description: str
    by_entity_id: bool
    error: BaseException
    case_id: str = ""


@dataclass(slots=True)
class SuiteReport:
    counts: OracleCounts
    failures: list[CaseFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _describe_error(exc: BaseException) -> dict[str, Any]:
    return {"error_code": error_code_of(exc), "error": f"{type(exc).__name__}: {exc}"}


def case_id(case: OracleCase, by_entity_id: bool) -> str:
    """Stable short id of one case run, independent of run order."""
    digest = stable_hash(
        {
            "description": case.description,
            "flags": case.flags,
            "by_entity_id": by_entity_id,
            "inputs": case.inputs,
        }
    )
    return digest[:12]


class OracleDriver:
    """Runs cases, validates outcomes and reports progress.

    Example:
        driver = OracleDriver(engine, lookup, settings)
        report = driver.run_suite(path_cases(lookup), network_cases(lookup))
        driver.finish()
    """

    def __init__(
        self,
        engine: SzEngine,
        lookup: RecordEntityLookup,
        settings: OracleSettings | None = None,
        *,
        name: str = "oracle",
        time_func: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the driver.

        Args:
            engine: Engine under test
            lookup: Entity snapshot of the loaded fixtures
            settings: Run settings (defaults when None)
            name: Label used in progress log lines
            time_func: Monotonic clock, injectable for tests
            sleep: Sleep function used before a fast-fail exit
        """
        self._engine = engine
        self._lookup = lookup
        self._settings = settings or OracleSettings()
        self._name = name
        self._time = time_func
        self._sleep = sleep
        self._counts = OracleCounts()
        self._last_progress: float | None = None

    @property
    def counts(self) -> OracleCounts:
        return self._counts

    @property
    def lookup(self) -> RecordEntityLookup:
        return self._lookup

    # -------------------------------------------------------------------------
    # Case execution
    # -------------------------------------------------------------------------

    def perform[T](self, test_fn: Callable[[], T], *, description: str | None = None) -> T:
        """Run one case, counting its outcome.

        Raises:
            SystemExit: On failure when fast_fail is enabled.
            BaseException: Whatever ``test_fn`` raised, otherwise.
        """
        try:
            result = test_fn()
        except Exception as exc:
            self._counts.failed += 1
            log = logger if description is None else logger.bind(case=description)
            log.error("case_failed", **_describe_error(exc), exc_info=exc)
            if self._settings.fast_fail:
                logger.error("fast_fail_exit", grace_seconds=self._settings.fast_fail_grace_seconds)
                self._sleep(self._settings.fast_fail_grace_seconds)
                raise SystemExit(1) from exc
            raise
        else:
            self._counts.succeeded += 1
            return result
        finally:
            self._log_progress(complete=False)

    def expect_outcome[T](
        self,
        call: Callable[[], T],
        expected_exception: type[BaseException] | None,
        validate: Callable[[T], Any],
        description: str,
    ) -> T | None:
        """Invoke an SDK call and check it succeeded or failed as expected.

        Returns the call's result when it succeeded (after ``validate``
        accepted it), or None when the expected exception was raised.

        Any exception from ``call``, SDK or not, is an outcome: one that is
        not the expected kind becomes an OracleAssertionError, so a broken
        engine fails the case instead of aborting the run.

        Raises:
            OracleAssertionError: If the outcome contradicts the expectation.
        """
        try:
            result = call()
        except Exception as exc:
            if expected_exception is None:
                raise OracleAssertionError(
                    "Unexpectedly failed", description=description, context=_describe_error(exc)
                ) from exc
            if not isinstance(exc, expected_exception):
                raise OracleAssertionError(
                    "Failed with an unexpected exception type",
                    description=description,
                    context={"expected": expected_exception.__name__, **_describe_error(exc)},
                ) from exc
            return None

        if expected_exception is not None:
            raise OracleAssertionError(
                "Unexpectedly succeeded",
                description=description,
                context={"expected": expected_exception.__name__},
            )
        validate(result)
        return result

    # -------------------------------------------------------------------------
    # Generated cases
    # -------------------------------------------------------------------------

    @staticmethod
    def _label(case: OracleCase, by_entity_id: bool) -> str:
        return f"{case.description} [{'by entity id' if by_entity_id else 'by record key'}]"

    def run_path_case(self, case: OracleCase, by_entity_id: bool) -> list[int] | None:
        """Run a find-path case; returns the validated chain, or None on expected error."""
        expected = case.expected
        if not isinstance(expected, ExpectedPathSpec):
            raise TypeError(f"not a path case: {case.description}")
        inputs = case.inputs
        description = self._label(case, by_entity_id)

        def call() -> str:
            if by_entity_id:
                return self._engine.find_path_by_entity(
                    inputs["start_id"],
                    inputs["end_id"],
                    expected.max_degrees,
                    inputs.get("avoid_ids"),
                    expected.required_sources or None,
                    case.flags,
                )
            return self._engine.find_path_by_record(
                expected.start_key,
                expected.end_key,
                expected.max_degrees,
                expected.avoid_keys or None,
                expected.required_sources or None,
                case.flags,
            )

        chain: list[int] | None = None

        def validate(result: str) -> None:
            nonlocal chain
            chain = validate_path(result, expected, case.flags, self._lookup, description=description)

        self.expect_outcome(call, case.error_for(by_entity_id), validate, description)
        return chain

    def run_network_case(self, case: OracleCase, by_entity_id: bool) -> dict[tuple[int, int], list[int]] | None:
        """Run a find-network case; returns validated paths, or None on expected error."""
        expected = case.expected
        if not isinstance(expected, ExpectedNetworkSpec):
            raise TypeError(f"not a network case: {case.description}")
        inputs = case.inputs
        description = self._label(case, by_entity_id)

        def call() -> str:
            if by_entity_id:
                return self._engine.find_network_by_entity(
                    inputs["ids"],
                    expected.max_degrees,
                    expected.build_out_degrees,
                    expected.build_out_max_entities,
                    case.flags,
                )
            return self._engine.find_network_by_record(
                inputs["keys"],
                expected.max_degrees,
                expected.build_out_degrees,
                expected.build_out_max_entities,
                case.flags,
            )

        paths: dict[tuple[int, int], list[int]] | None = None

        def validate(result: str) -> None:
            nonlocal paths
            paths = validate_network(result, expected, case.flags, self._lookup, description=description)

        self.expect_outcome(call, case.error_for(by_entity_id), validate, description)
        return paths

    def run_case(self, case: OracleCase, by_entity_id: bool) -> Any:
        if isinstance(case.expected, ExpectedPathSpec):
            return self.run_path_case(case, by_entity_id)
        return self.run_network_case(case, by_entity_id)

    def run_suite(self, *case_lists: Iterable[OracleCase]) -> SuiteReport:
        """Run every case both ways, recording failures instead of stopping.

        With fast_fail enabled the first failure still terminates the run.
        """
        report = SuiteReport(counts=self._counts)
        for cases in case_lists:
            for case in cases:
                for by_entity_id in (False, True):
                    run_id = case_id(case, by_entity_id)
                    with bound_case(suite=self._name, case=self._label(case, by_entity_id), case_id=run_id):
                        logger.debug("case_started", flags=case.flags)
                        try:
                            self.perform(partial(self.run_case, case, by_entity_id))
                        except (OracleAssertionError, SzError) as exc:
                            report.failures.append(CaseFailure(case.description, by_entity_id, exc, run_id))
        return report

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def _log_progress(self, *, complete: bool) -> None:
        now = self._time()
        if self._last_progress is None:
            self._last_progress = now
        if complete or now - self._last_progress > self._settings.progress_interval_seconds:
            logger.info(
                "oracle_complete" if complete else "oracle_progress",
                suite=self._name,
                succeeded=self._counts.succeeded,
                failed=self._counts.failed,
                summary=f"{'Complete' if complete else 'Progress'}: {self._counts}",
            )
            self._last_progress = now

    def finish(self) -> OracleCounts:
        """Log the final tally and return it."""
        self._log_progress(complete=True)
        return self._counts
