# src/configflow/core/download.py
"""
Download concorrente do estado remoto, um pedido por tipo de recurso.

Cada tipo é listado em uma tarefa do pool; os resultados voltam para a
thread chamadora via `as_completed`, que é a única a escrever no mapa de
resultados. A falha de um tipo é coletada e não interrompe os demais.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from configflow.core.config.options import DEFAULT_CALL_TIMEOUT_SECONDS, DEFAULT_MAX_WORKERS
from configflow.core.exceptions import AggregateError
from configflow.core.upsert.clients import DeploymentClient

logger = logging.getLogger(__name__)


@dataclass
class DownloadResult:
    objects: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    errors: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise AggregateError(
                "failed to download some resource kinds",
                [self.errors[k] for k in sorted(self.errors)],
            )


def download_all(
    clients: Mapping[str, DeploymentClient],
    *,
    timeout: float = DEFAULT_CALL_TIMEOUT_SECONDS,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> DownloadResult:
    result = DownloadResult()
    if not clients:
        return result

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(client.list, timeout=timeout): kind for kind, client in clients.items()}
        for future in as_completed(futures):
            kind = futures[future]
            try:
                result.objects[kind] = future.result()
            except Exception as e:
                logger.error("failed to download %s: %s", kind, e)
                result.errors[kind] = e

    logger.info("downloaded %d kind(s), %d failed", len(result.objects), len(result.errors))
    return result
