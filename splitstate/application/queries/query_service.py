"""Query service.

Serves reads from the read store only. It never touches the write store, so
its answers may lag recent commands until the projection engine catches up.

Architecture:
- Application layer service
- Depends on ReadStoreReader (read-only port): it cannot write views
- Returns Result types (absent views are a normal outcome, not an exception)
"""

from collections.abc import Collection

from splitstate.application.errors.application_error import (
    ApplicationError,
    ApplicationErrorCode,
)
from splitstate.application.projections.order_projectors import ORDER_SUMMARY
from splitstate.application.queries.view_queries import ViewCriteria
from splitstate.core.enums import ErrorCode
from splitstate.core.errors import NotFoundError
from splitstate.core.result import Failure, Result, Success
from splitstate.domain.protocols.logger_protocol import LoggerProtocol
from splitstate.domain.protocols.read_store_protocol import ReadModel, ReadStoreReader


class QueryService:
    """Read-only access to projected views.

    Dependencies (injected via constructor):
        - ReadStoreReader: view lookups
        - projections: names of the projections that exist
        - LoggerProtocol: structured logging
    """

    def __init__(
        self,
        reader: ReadStoreReader,
        projections: Collection[str],
        logger: LoggerProtocol,
    ) -> None:
        self._reader = reader
        self._projections = frozenset(projections)
        self._logger = logger

    async def query(
        self, criteria: ViewCriteria
    ) -> Result[list[ReadModel], ApplicationError]:
        """Find views matching the criteria.

        Args:
            criteria: Projection, equality filters and paging.

        Returns:
            Success(list[ReadModel]): Matching views ordered by view id
                (possibly empty).
            Failure(ApplicationError): QUERY_FAILED for an unknown projection
                or a read-store failure.
        """
        if criteria.projection not in self._projections:
            return Failure(error=self._unknown_projection(criteria.projection))

        try:
            views = await self._reader.find(
                criteria.projection,
                criteria.filters,
                limit=criteria.limit,
                offset=criteria.offset,
            )
        except Exception as e:
            self._logger.error(
                "query_failed", error=e, projection=criteria.projection
            )
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.QUERY_FAILED,
                    message=f"Read store failed: {e}",
                )
            )

        self._logger.debug(
            "query_executed",
            projection=criteria.projection,
            filters=sorted(criteria.filters),
            result_count=len(views),
        )
        return Success(value=views)

    async def get_by_id(
        self, view_id: str, projection: str = ORDER_SUMMARY
    ) -> Result[ReadModel, NotFoundError | ApplicationError]:
        """Fetch one view.

        Args:
            view_id: View key (the aggregate id for per-aggregate views).
            projection: View kind (defaults to order_summary).

        Returns:
            Success(ReadModel): View found.
            Failure(NotFoundError): No live view (never projected, tombstoned,
                or not projected yet).
            Failure(ApplicationError): Unknown projection or read-store failure.
        """
        if projection not in self._projections:
            return Failure(error=self._unknown_projection(projection))

        try:
            view = await self._reader.get(projection, view_id)
        except Exception as e:
            self._logger.error(
                "query_failed", error=e, projection=projection, view_id=view_id
            )
            return Failure(
                error=ApplicationError(
                    code=ApplicationErrorCode.QUERY_FAILED,
                    message=f"Read store failed: {e}",
                )
            )

        if view is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.VIEW_NOT_FOUND,
                    message=f"{projection} view not found",
                    resource_type=projection,
                    resource_id=view_id,
                )
            )
        return Success(value=view)

    def _unknown_projection(self, projection: str) -> ApplicationError:
        self._logger.warning("query_unknown_projection", projection=projection)
        return ApplicationError(
            code=ApplicationErrorCode.QUERY_FAILED,
            message=f"Unknown projection: {projection}",
            details={"projection": projection},
        )
