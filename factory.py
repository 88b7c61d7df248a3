"""
The verifying factory.

The factory does NOT just construct ``Num`` instances - it *verifies*
them against their contract before releasing them.

Flow:
  1. Caller requests a ``Num`` for a given IntWidth.
  2. Factory builds the instance and the contract for that width.
  3. Factory checks every postcondition, error condition and
     algebraic property against the instance.
  4. If verification passes  -> return the instance.
     If verification fails   -> raise, never hand out a broken instance.

Small widths are checked exhaustively; wide ones are checked on edge
values plus a reproducible random sample.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from contracts import (
    BIT_INDEX_DOMAIN,
    AlgebraicProperty,
    NumContract,
    OperationSpec,
    build_contract,
)
from intwidth import IntWidth
from num import Num, NumError
from settings import DEFAULT_SETTINGS, VerificationSettings

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of verifying one check."""

    check_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0
    detail: str = ""

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        detail = f"  {self.detail}" if self.detail else ""
        return f"[{status}] {self.check_name} ({self.tests_run} tests){ce}{detail}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying one operation."""

    operation: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        lines = [f"--- {self.operation} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when an implementation fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class NumFactory:
    """
    Produces ``Num`` instances that are proven correct for their width.

    For widths whose input space fits ``exhaustive_limit`` the factory
    checks every input combination.  Otherwise it falls back to edge
    values plus seeded random samples (which the test layer extends
    with hypothesis).
    """

    @classmethod
    def create(
        cls, width: IntWidth, settings: VerificationSettings | None = None
    ) -> Num:
        """Build, verify, and return a ``Num`` for ``width``."""
        num = Num(width=width)
        for report in cls.verify(num, settings):
            if not report.passed:
                raise VerificationError(report)
        return num

    @classmethod
    def verify(
        cls, num: Any, settings: VerificationSettings | None = None
    ) -> list[VerificationReport]:
        """Check ``num`` against the contract for its width.

        Failures are reported, not raised; only a ``num`` without a
        fixed width is rejected.
        """
        if num.width is None:
            raise ValueError("verification needs a fixed integer width")
        settings = settings or DEFAULT_SETTINGS
        contract = build_contract(num.width)
        reports = [
            cls._verify_operation(contract, op, num, settings)
            for op in contract.operations.values()
        ]
        failed = [r for r in reports if not r.passed]
        for r in failed:
            logger.warning("%s failed verification:\n%s", num.width, r.summary())
        logger.info(
            "verified %s: %d operations, %d checks, %s",
            num.width,
            len(reports),
            sum(r.tests_run for r in reports),
            "passed" if not failed else f"{len(failed)} failed",
        )
        return reports

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_operation(
        cls,
        contract: NumContract,
        op: OperationSpec,
        num: Any,
        settings: VerificationSettings,
    ) -> VerificationReport:
        report = VerificationReport(operation=op.name)
        report.results.append(cls._verify_calls(contract, op, num, settings))
        for prop in op.properties:
            report.results.append(
                cls._verify_property(prop, num, contract.width, settings)
            )
        return report

    @classmethod
    def _verify_calls(
        cls,
        contract: NumContract,
        op: OperationSpec,
        num: Any,
        settings: VerificationSettings,
    ) -> VerificationResult:
        """Postconditions and error conditions over the operation's inputs."""
        fn = getattr(num, op.name)
        domains = [
            BIT_INDEX_DOMAIN if i in op.index_args else None
            for i in range(op.arity)
        ]
        tests_run = 0
        for combo in _input_tuples(contract.width, domains, settings):
            tests_run += 1
            expected = contract.expected_error(op.name, *combo)
            if expected is not None:
                try:
                    fn(*combo)
                except expected.exception:
                    continue
                except Exception as exc:
                    return _failure(
                        op.name, combo, tests_run,
                        f"{expected.name}: raised {type(exc).__name__}",
                    )
                return _failure(
                    op.name, combo, tests_run,
                    f"{expected.name}: did not raise {expected.exception.__name__}",
                )

            try:
                result = fn(*combo)
            except NumError as exc:
                return _failure(
                    op.name, combo, tests_run, f"unexpected {type(exc).__name__}"
                )
            for post in op.postconditions:
                if not post.check(*combo, result):
                    return _failure(
                        op.name, combo, tests_run, f"{post.name}: got {result!r}"
                    )

        return VerificationResult(
            check_name=op.name, passed=True, tests_run=tests_run
        )

    @classmethod
    def _verify_property(
        cls,
        prop: AlgebraicProperty,
        num: Any,
        width: IntWidth,
        settings: VerificationSettings,
    ) -> VerificationResult:
        tests_run = 0
        for combo in _input_tuples(width, [None] * prop.arity, settings):
            tests_run += 1
            try:
                if not prop.check(num, *combo):
                    return VerificationResult(
                        check_name=prop.name,
                        passed=False,
                        counterexample=combo,
                        tests_run=tests_run,
                    )
            except NumError:
                # Precondition violations reached through the property
                # are not property violations
                pass

        return VerificationResult(
            check_name=prop.name,
            passed=True,
            tests_run=tests_run,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _failure(
    name: str, combo: tuple, tests_run: int, detail: str
) -> VerificationResult:
    return VerificationResult(
        check_name=name,
        passed=False,
        counterexample=combo,
        tests_run=tests_run,
        detail=detail,
    )


def _input_tuples(
    width: IntWidth,
    domains: Sequence[Iterable[int] | None],
    settings: VerificationSettings,
) -> Iterable[tuple[int, ...]]:
    """Every input tuple when the space is small enough, else samples.

    ``None`` in ``domains`` stands for the values of ``width``.
    """
    space = 1
    for d in domains:
        space *= width.size if d is None else len(d)

    if space <= settings.exhaustive_limit:
        return itertools.product(
            *(width.all_values() if d is None else d for d in domains)
        )
    return _generate_samples(width, domains, settings)


def edge_values(width: IntWidth, settings: VerificationSettings) -> list[int]:
    """Values every sampled check includes."""
    candidates = [
        width.lo, width.lo + 1, -1, 0, 1, 2, width.hi - 1, width.hi,
        *settings.extra_edges,
    ]
    out: list[int] = []
    for v in candidates:
        if width.contains(v) and v not in out:
            out.append(v)
    return out


def _generate_samples(
    width: IntWidth,
    domains: Sequence[Iterable[int] | None],
    settings: VerificationSettings,
) -> list[tuple[int, ...]]:
    """Generate edge-case + seeded random samples for property checking."""
    rng = random.Random(settings.seed)
    edges = edge_values(width, settings)
    pools = [edges if d is None else list(d) for d in domains]

    samples: list[tuple[int, ...]] = []

    # All edge combinations
    for combo in itertools.product(*pools):
        if len(samples) >= settings.sample_count:
            break
        samples.append(combo)

    # Random fill
    while len(samples) < settings.sample_count:
        samples.append(tuple(
            rng.randint(width.lo, width.hi) if d is None else rng.choice(pools[i])
            for i, d in enumerate(domains)
        ))

    return samples
