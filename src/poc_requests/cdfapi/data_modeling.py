"""Data modeling endpoints: data models, instance search and GraphQL."""

from collections.abc import Sequence
from typing import Any

from .session import APISession
from .types import (
    DataModelList,
    GraphQLResponse,
    NodeList,
    SearchSort,
    TargetUnitsDM,
    ViewReference,
)
from .utils import drop_none


class DataModelingAPI:
    """Data modeling resources of a CDF project."""

    def __init__(self, session: APISession):
        self._session = session

    def list_data_models(
        self,
        limit: int = 10,
        cursor: str | None = None,
        space: str | None = None,
        all_versions: bool = False,
        include_global: bool = False,
    ) -> DataModelList:
        """List data models.

        Args:
            limit: Maximum number of data models to return.
            cursor: Cursor from a previous page.
            space: Only data models in this space.
            all_versions: Return every version instead of the latest only.
            include_global: Include global (system) data models.

        Returns:
            The page of data models and the cursor of the next one.
        """
        params = {
            "cursor": cursor,
            "space": space,
            "limit": limit,
            "allVersions": all_versions,
            "includeGlobal": include_global,
        }
        return self._session.get(
            self._session.project_path("models/datamodels"),
            DataModelList,
            action="failed to fetch data models",
            params=params,
        )

    def search_instances(
        self,
        view: ViewReference,
        query: str,
        instance_type: str | None = None,
        properties: Sequence[str] | None = None,
        target_units: Sequence[TargetUnitsDM] | None = None,
        filter: dict[str, Any] | None = None,  # noqa: A002
        sort: Sequence[SearchSort] | None = None,
        limit: int = 1000,
    ) -> NodeList:
        """Free-text search for instances of a view.

        Args:
            view: View whose instances are searched.
            query: Search query.
            instance_type: "node" or "edge".
            properties: Properties to search in; all text properties if unset.
            target_units: Unit conversions applied to numeric properties.
            filter: Filter expression, passed through as is.
            sort: Sort order of the results.
            limit: Maximum number of instances to return.

        Returns:
            The matching instances.
        """
        body = drop_none(
            {
                "view": view.to_api(),
                "query": query,
                "instanceType": instance_type,
                "properties": list(properties) if properties is not None else None,
                "targetUnits": (
                    [unit.to_api() for unit in target_units]
                    if target_units is not None
                    else None
                ),
                "filter": filter,
                "sort": [s.to_api() for s in sort] if sort is not None else None,
                "limit": limit,
            },
        )
        return self._session.post(
            self._session.project_path("models/instances/search"),
            body,
            NodeList,
            action="failed to search instances",
        )

    def graphql_query(
        self,
        space: str,
        external_id: str,
        version: str,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> GraphQLResponse:
        """Run a GraphQL query against a data model.

        GraphQL errors are returned in ``GraphQLResponse.errors`` with a
        200 status and are not raised.
        """
        endpoint = self._session.project_path(
            f"userapis/spaces/{space}/datamodels/{external_id}"
            f"/versions/{version}/graphql",
        )
        return self._session.post(
            endpoint,
            {"query": query, "variables": variables or {}},
            GraphQLResponse,
            action="GraphQL query failed",
        )
