"""Units catalog endpoints."""

from collections.abc import Sequence

from .session import APISession
from .types import UnitList


class UnitsAPI:
    """Units catalog of a CDF project."""

    def __init__(self, session: APISession):
        self._session = session

    def list(self) -> UnitList:
        """List all units in the catalog."""
        return self._session.get(
            self._session.project_path("units"),
            UnitList,
            action="failed to fetch units",
        )

    def retrieve(self, external_ids: Sequence[str]) -> UnitList:
        """Retrieve units by external id.

        Used to resolve the ``unit_external_id`` of a time series, which
        the API returns as a plain reference.
        """
        body = {"items": [{"externalId": external_id} for external_id in external_ids]}
        return self._session.post(
            self._session.project_path("units/byids"),
            body,
            UnitList,
            action="failed to retrieve units",
        )
