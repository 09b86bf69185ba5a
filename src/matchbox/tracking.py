"""
Optional MLflow tracking for training runs.

Every helper resolves MLflow through ``_mlflow()``; when it is not
installed the helpers do nothing and training carries on untracked.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Dict, Iterator, Optional


def _mlflow() -> Optional[ModuleType]:
    try:
        import mlflow  # type: ignore
    except ImportError:
        return None
    return mlflow


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[None]:
    mlflow = _mlflow() if enabled else None
    if mlflow is None:
        if enabled:
            logging.warning("MLflow not installed; training runs untracked")
        yield None
        return
    if log_dir is not None:
        mlflow.set_tracking_uri((log_dir / "mlruns").as_uri())
    with mlflow.start_run(run_name=run_name):
        yield None


def log_params(params: Dict[str, object]) -> None:
    mlflow = _mlflow()
    if mlflow is not None and mlflow.active_run() is not None:
        mlflow.log_params(params)


def log_metrics(metrics: Dict[str, float]) -> None:
    mlflow = _mlflow()
    if mlflow is not None and mlflow.active_run() is not None:
        mlflow.log_metrics(metrics)
