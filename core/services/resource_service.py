# =============================================================================
# core/services/resource_service.py - Category and Resource Queries
# =============================================================================
# Listing, searching and creating resource records. Joined category and
# uploader columns are flattened onto Resource.
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from app.exceptions import BreezException
from core.models.resource import Category, Resource, ResourceCreate
from core.models.results import QueryResult
from lib.utils import normalize_uuid

from .base import BackendService

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"
RESOURCE_COLUMNS = "*, categories(name), user_profiles(full_name, student_id)"
# !inner makes the category filter drop non-matching resources
RESOURCE_COLUMNS_BY_CATEGORY = "*, categories!inner(name), user_profiles(full_name, student_id)"


def flatten_resource(row: dict[str, Any]) -> Resource:
    """Move joined `categories` / `user_profiles` columns onto the resource."""
    row = dict(row)
    category = row.pop("categories", None) or {}
    uploader = row.pop("user_profiles", None) or {}
    row["category_name"] = category.get("name")
    row["uploader_name"] = uploader.get("full_name")
    row["uploader_student_id"] = uploader.get("student_id")
    return Resource.model_validate(row)


class ResourceService(BackendService):
    """Queries against `categories` and `resources`."""

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def get_categories(self) -> list[Category]:
        """Active categories ordered by name."""
        try:
            query = (await self.backend.table("categories")).select("*").eq("is_active", True).order("name")
            rows = await self._fetch(query, "fetch categories")
            return [Category.model_validate(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching categories: {e}")
            return []

    async def find_category(self, name: str) -> Category | None:
        """Exact-name lookup in the active category list."""
        for category in await self.get_categories():
            if category.name == name:
                return category
        return None

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    async def get_resources(
        self,
        category: str | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Resource]:
        """
        Approved, active resources, most downloaded first.

        Args:
            category: Category name; None or "All" means every category
            search: Case-insensitive match on title or description
            limit: Maximum rows
            offset: Rows to skip (page size is `limit`, default 10)
        """
        by_category = bool(category and category != ALL_CATEGORIES)
        try:
            query = (
                (await self.backend.table("resources"))
                .select(RESOURCE_COLUMNS_BY_CATEGORY if by_category else RESOURCE_COLUMNS)
                .eq("is_approved", True)
                .eq("is_active", True)
            )
            if by_category:
                query = query.eq("categories.name", category)
            if search:
                query = query.or_(f"title.ilike.%{search}%,description.ilike.%{search}%")
            if limit:
                query = query.limit(limit)
            if offset:
                query = query.range(offset, offset + (limit or 10) - 1)
            query = query.order("download_count", desc=True)

            rows = await self._fetch(query, "fetch resources", {"category": category, "search": search})
            return [flatten_resource(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching resources: {e}")
            return []

    async def search_resources(
        self,
        query_text: str,
        category: str | None = None,
        file_type: str | None = None,
        limit: int | None = None,
    ) -> list[Resource]:
        """Like get_resources, but the text also matches tags exactly."""
        by_category = bool(category and category != ALL_CATEGORIES)
        try:
            query = (
                (await self.backend.table("resources"))
                .select(RESOURCE_COLUMNS_BY_CATEGORY if by_category else RESOURCE_COLUMNS)
                .eq("is_approved", True)
                .eq("is_active", True)
            )
            if query_text:
                query = query.or_(
                    f"title.ilike.%{query_text}%,description.ilike.%{query_text}%,tags.cs.{{{query_text}}}"
                )
            if by_category:
                query = query.eq("categories.name", category)
            if file_type:
                query = query.eq("file_type", file_type)
            if limit:
                query = query.limit(limit)
            query = query.order("download_count", desc=True)

            rows = await self._fetch(query, "search resources", {"query": query_text})
            return [flatten_resource(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error searching resources: {e}")
            return []

    async def upload_resource(self, resource: ResourceCreate) -> QueryResult:
        """Insert a resource record; `data` is the created Resource."""
        result = await self._write(
            "resources",
            lambda table: table.insert(resource.model_dump()),
            "create resource record",
            {"title": resource.title, "uploader_id": resource.uploader_id},
        )
        if result.ok:
            result.data = Resource.model_validate(result.data)
            logger.info(f"Created resource {result.data.id} ({resource.coin_price} coins)")
        return result

    async def get_user_resources(self, user_id: str) -> list[Resource]:
        """Everything a user uploaded, newest first, approved or not."""
        user_id = normalize_uuid(user_id)
        try:
            query = (
                (await self.backend.table("resources"))
                .select("*, categories(name)")
                .eq("uploader_id", user_id)
                .order("created_at", desc=True)
            )
            rows = await self._fetch(query, "fetch user resources", {"user_id": user_id})
            return [flatten_resource(row) for row in rows or []]
        except (BreezException, ValidationError) as e:
            logger.error(f"Error fetching user resources: {e}")
            return []
