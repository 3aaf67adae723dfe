from dataclasses import dataclass

from src.catalog.core.services import (
    DbSessionService,
    PendingSyncLog,
    ProductSearchExecutor,
    SearchClientService,
    SearchMirrorSynchronizer,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    search_service: SearchClientService
    synchronizer: SearchMirrorSynchronizer
    search_executor: ProductSearchExecutor
    sync_failure_log: PendingSyncLog | None = None
