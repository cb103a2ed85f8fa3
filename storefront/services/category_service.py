"""Category business logic"""
from typing import Dict, List, Optional
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.cache import CATEGORIES_CACHE, PRODUCTS_CACHE, cached, caches
from storefront.db.database import after_commit, transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import BadRequestError, DuplicateResourceError, ResourceNotFoundError
from storefront.models.product import Category
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.catalog import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _to_response(category: Category) -> CategoryResponse:
    return CategoryResponse.model_validate(category)


class CategoryService:
    """Category service for business logic"""

    @staticmethod
    def find_category(db: Session, category_id: UUID) -> Category:
        category = CategoryRepository.find_by_id(db, category_id)
        if category is None:
            raise ResourceNotFoundError.for_resource("Category", category_id)
        return category

    @staticmethod
    def _check_parent(db: Session, parent_id: Optional[UUID]) -> None:
        if parent_id is not None and CategoryRepository.find_by_id(db, parent_id) is None:
            raise ResourceNotFoundError("Category", "parentCategoryId", parent_id)

    @staticmethod
    @transactional
    def create_category(db: Session, data: CategoryCreate) -> CategoryResponse:
        """Create new category"""
        with tracer.start_as_current_span("category_service.create_category") as span:
            name = data.category_name.strip()
            if CategoryRepository.find_by_name(db, name) is not None:
                raise DuplicateResourceError("Category", "name", name)
            CategoryService._check_parent(db, data.parent_category_id)

            now = utcnow()
            category = Category(
                id=new_id(),
                category_name=name,
                parent_category_id=data.parent_category_id,
                created_at=now,
                updated_at=now,
            )
            CategoryRepository.save(db, category)

            span.set_attribute("category.id", str(category.id))
            logger.info(f"Created category {category.id}: {name}")

            response = _to_response(category)
            after_commit(db, lambda: caches.refresh(CATEGORIES_CACHE, response, [f"id:{category.id}"]))
            return response

    @staticmethod
    @transactional
    def update_category(db: Session, category_id: UUID, data: CategoryUpdate) -> CategoryResponse:
        """Rename or re-parent a category"""
        with tracer.start_as_current_span("category_service.update_category") as span:
            span.set_attribute("category.id", str(category_id))
            category = CategoryService.find_category(db, category_id)

            if data.category_name is not None:
                name = data.category_name.strip()
                existing = CategoryRepository.find_by_name(db, name)
                if existing is not None and existing.id != category.id:
                    raise DuplicateResourceError("Category", "name", name)
                category.category_name = name

            if "parent_category_id" in data.model_fields_set:
                if data.parent_category_id == category.id:
                    raise BadRequestError("Category cannot be its own parent")
                CategoryService._check_parent(db, data.parent_category_id)
                category.parent_category_id = data.parent_category_id

            category.updated_at = utcnow()
            CategoryRepository.update(db, category)
            logger.info(f"Updated category {category_id}")

            response = _to_response(category)
            after_commit(
                db,
                lambda: caches.refresh(
                    CATEGORIES_CACHE, response, [f"id:{category.id}"], also_clear=[PRODUCTS_CACHE]
                ),
            )
            return response

    @staticmethod
    @cached(CATEGORIES_CACHE, key=lambda db, category_id: f"id:{category_id}")
    @transactional(read_only=True)
    def get_category(db: Session, category_id: UUID) -> CategoryResponse:
        """Get category by ID"""
        return _to_response(CategoryService.find_category(db, category_id))

    @staticmethod
    @transactional(read_only=True)
    def get_categories(db: Session) -> List[CategoryResponse]:
        return [_to_response(category) for category in CategoryRepository.find_all(db)]

    @staticmethod
    @transactional(read_only=True)
    def get_root_categories(db: Session) -> List[CategoryResponse]:
        return [_to_response(category) for category in CategoryRepository.find_roots(db)]

    @staticmethod
    @transactional(read_only=True)
    def get_subcategories(db: Session, parent_id: UUID) -> List[CategoryResponse]:
        CategoryService.find_category(db, parent_id)
        return [_to_response(category) for category in CategoryRepository.find_by_parent(db, parent_id)]

    @staticmethod
    @transactional(read_only=True)
    def get_category_tree(db: Session) -> List[CategoryResponse]:
        """All categories nested under their parents, roots first"""
        nodes: Dict[UUID, CategoryResponse] = {}
        categories = CategoryRepository.find_all(db)
        for category in categories:
            nodes[category.id] = _to_response(category)

        roots = []
        for category in categories:
            node = nodes[category.id]
            parent = nodes.get(category.parent_category_id) if category.parent_category_id else None
            if parent is None:
                roots.append(node)
            else:
                parent.subcategories.append(node)
        return roots

    @staticmethod
    @transactional
    def delete_category(db: Session, category_id: UUID) -> None:
        """Delete a category that no product or subcategory references"""
        with tracer.start_as_current_span("category_service.delete_category") as span:
            span.set_attribute("category.id", str(category_id))
            CategoryService.find_category(db, category_id)

            if ProductRepository.count_by_category(db, category_id) > 0:
                raise BadRequestError("Cannot delete category with existing products")
            if CategoryRepository.count_children(db, category_id) > 0:
                raise BadRequestError("Cannot delete category with subcategories")

            CategoryRepository.delete(db, category_id)
            logger.info(f"Deleted category {category_id}")
            after_commit(db, lambda: caches.evict(CATEGORIES_CACHE, [f"id:{category_id}"]))
