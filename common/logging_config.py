"""
Logging Configuration and Audit Trail Infrastructure.

This module provides structured logging for the divided-difference engine
and an audit trail for numerical consistency checks. A validation run
records, for every check performed:
- The property checked (limit consistency, antisymmetry, ...)
- The residual observed and the tolerance it was held to
- The engine configuration it ran against

so that an accuracy regression can be traced to a specific ellipsoid,
precision and conversion pair.
"""

import hashlib
import json
import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the auxiliary-latitude engine.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


@dataclass
class CheckResidual:
    """One residual of a numerical consistency check.

    Attributes
    ----------
    timestamp : datetime
        When the residual was computed.
    check_name : str
        Which property was checked (e.g. 'antisymmetry').
    residual_value : float
        The residual magnitude; NaN counts as a failure.
    tolerance : float
        The acceptable tolerance.
    passed : bool
        Whether the residual is within tolerance.
    context : dict
        Conversion pair, latitudes and similar details.
    """
    timestamp: datetime
    check_name: str
    residual_value: float
    tolerance: float
    passed: bool
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record["timestamp"] = self.timestamp.isoformat()
        return record


@dataclass
class RunMetadata:
    """Engine description and residuals of one validation run."""
    run_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    config_hash: str = ""
    engine_metadata: Dict[str, Any] = field(default_factory=dict)
    residuals: List[CheckResidual] = field(default_factory=list)

    def compute_config_hash(self, config: Dict[str, Any]) -> str:
        """Deterministic 16-hex-digit SHA-256 prefix of the configuration."""
        config_str = json.dumps(config, sort_keys=True, default=str)
        self.config_hash = hashlib.sha256(config_str.encode()).hexdigest()[:16]
        return self.config_hash

    @property
    def failed(self) -> int:
        return sum(1 for r in self.residuals if not r.passed)

    def per_check(self) -> Dict[str, Dict[str, Any]]:
        """Count, failures and worst residual for each check name."""
        checks: Dict[str, Dict[str, Any]] = {}
        for r in self.residuals:
            entry = checks.setdefault(
                r.check_name,
                {"count": 0, "failed": 0, "max_residual": 0.0}
            )
            entry["count"] += 1
            if not r.passed:
                entry["failed"] += 1
            # max() ignores a NaN second argument, keep it visible
            magnitude = abs(r.residual_value)
            if magnitude != magnitude or magnitude > entry["max_residual"]:
                entry["max_residual"] = magnitude
        return checks

    def header(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "config_hash": self.config_hash,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


class AuditLogger:
    """Process-wide record of consistency-check residuals.

    Thread Safety
    -------------
    Run registration and residual recording share one lock, so checks may
    run from several threads against the same engine.

    Examples
    --------
    >>> audit = AuditLogger()
    >>> with audit.run_context("wgs84_double") as run:
    ...     audit.log_residual(
    ...         check_name="antisymmetry",
    ...         residual_value=0.0,
    ...         tolerance=1e-15,
    ...         context={"pair": "PHI->MU"}
    ...     )
    >>> summary = audit.get_run_summary("wgs84_double")
    """

    _instance: Optional['AuditLogger'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'AuditLogger':
        """Singleton pattern for global audit logger."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._runs: Dict[str, RunMetadata] = {}
        self._current_run_id: Optional[str] = None
        self._records_lock = threading.Lock()
        self._logger = get_logger("audit")
        self._initialized = True

    def _get_run(self, run_id: str) -> RunMetadata:
        try:
            return self._runs[run_id]
        except KeyError:
            raise KeyError(f"No run found with ID {run_id}") from None

    @contextmanager
    def run_context(self, run_id: str, config: Optional[Dict[str, Any]] = None):
        """Context manager for a validation run.

        Parameters
        ----------
        run_id : str
            Unique identifier for this run.
        config : dict, optional
            Engine description; hashed and stored with the run.

        Yields
        ------
        RunMetadata
            The metadata object for this run.
        """
        metadata = RunMetadata(run_id=run_id, start_time=datetime.now())
        if config:
            metadata.compute_config_hash(config)
            metadata.engine_metadata = dict(config)

        with self._records_lock:
            self._runs[run_id] = metadata
            self._current_run_id = run_id
        self._logger.info(f"Starting run {run_id} with config hash {metadata.config_hash}")

        try:
            yield metadata
        finally:
            metadata.end_time = datetime.now()
            with self._records_lock:
                self._current_run_id = None
            self._logger.info(
                f"Completed run {run_id}. "
                f"Checks: {len(metadata.residuals)}, failed: {metadata.failed}"
            )

    def log_residual(
        self,
        check_name: str,
        residual_value: float,
        tolerance: float,
        context: Optional[Dict[str, Any]] = None
    ) -> CheckResidual:
        """Record a residual against the current run, if any.

        Passing residuals are logged at DEBUG, failing ones at WARNING.
        """
        # abs(nan) <= tol is False, so NaN fails
        residual = CheckResidual(
            timestamp=datetime.now(),
            check_name=check_name,
            residual_value=float(residual_value),
            tolerance=float(tolerance),
            passed=bool(abs(residual_value) <= tolerance),
            context=context or {}
        )

        with self._records_lock:
            run = self._runs.get(self._current_run_id) if self._current_run_id else None
            if run is not None:
                run.residuals.append(residual)

        log_msg = (
            f"CHECK | {check_name} | {'PASS' if residual.passed else 'FAIL'} | "
            f"residual={residual.residual_value:.6e} (tolerance={tolerance:.6e})"
        )
        if residual.passed:
            self._logger.debug(log_msg)
        else:
            self._logger.warning(log_msg)
        return residual

    def get_run_summary(self, run_id: str) -> Dict[str, Any]:
        """Per-check pass counts and worst residuals of a run.

        Raises
        ------
        KeyError
            If no run with this identifier was recorded.
        """
        run = self._get_run(run_id)
        summary = run.header()
        summary.update(
            total_checks=len(run.residuals),
            total_failed=run.failed,
            checks=run.per_check(),
        )
        return summary

    def export_run_artifacts(self, run_id: str, output_path: Path) -> None:
        """Write the engine description and every residual of a run to JSON."""
        run = self._get_run(run_id)
        artifacts = run.header()
        artifacts["engine_metadata"] = run.engine_metadata
        artifacts["residuals"] = [r.to_dict() for r in run.residuals]

        with open(output_path, 'w') as f:
            json.dump(artifacts, f, indent=2, default=str)
        self._logger.info(f"Exported audit artifacts to {output_path}")
