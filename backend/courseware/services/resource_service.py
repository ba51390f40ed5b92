"""
Courseware Backend — Resource Service (Handler Set)
=====================================================

What:  Translates the three canonical operations (list, get_by_id, create)
       into storage calls, and storage outcomes into application results.
How:   Each method makes exactly one store round trip. Misses become
       NotFoundError, store failures become StorageError, and uncoercible
       create payloads become ValidationError.
Who:   Called by the generic resource router; also usable without HTTP.

Outcome Table:
    ┌────────────┬──────────────────────┬───────────────┬──────────────┐
    │ Operation  │ Success              │ Miss          │ Store raises │
    ├────────────┼──────────────────────┼───────────────┼──────────────┤
    │ list       │ non-empty list       │ NotFoundError │ StorageError │
    │ get_by_id  │ instance             │ NotFoundError │ StorageError │
    │ create     │ instance with new id │ —             │ StorageError │
    └────────────┴──────────────────────┴───────────────┴──────────────┘

    An empty listing is reported as NotFoundError, not as an empty success.
    Callers that want "no data" semantics must catch it.

No retries, caching or batching happen here. The service holds no state
beyond its two collaborators, so concurrent calls are independent.
"""

import logging
from typing import Any, Generic, List

from courseware.exceptions import NotFoundError, StorageError, ValidationError
from courseware.schemas.resource import Invalid, ModelT, ResourceDefinition
from courseware.services.storage import ResourceStore

logger = logging.getLogger(__name__)


class ResourceService(Generic[ModelT]):
    """
    Handler set for one resource.

    Args:
        definition: The resource's schema and messages
        store:      Storage collaborator for the resource's collection
    """

    def __init__(self, definition: ResourceDefinition[ModelT], store: ResourceStore):
        self.definition = definition
        self.store = store

    def _storage_error(self, action: str, exc: Exception, **context: Any) -> StorageError:
        logger.error(
            "Storage error during %s on %s: %s",
            action,
            self.definition.path,
            str(exc),
            exc_info=True,
        )
        return StorageError(
            message=str(exc) or f"Could not {action} {self.definition.path}",
            context={"error_type": type(exc).__name__, "resource": self.definition.name, **context},
        )

    async def list(self) -> List[ModelT]:
        """
        Return every stored instance.

        Raises:
            NotFoundError: The store holds zero instances
            StorageError:  The store call failed
        """
        try:
            documents = await self.store.find_all()
        except Exception as e:
            raise self._storage_error("list", e) from e

        if not documents:
            raise NotFoundError(message=self.definition.empty_message, resource=self.definition.name)

        return [self.definition.from_document(doc) for doc in documents]

    async def get_by_id(self, resource_id: str) -> ModelT:
        """
        Look up exactly one instance by identifier.

        The id format is not checked here; a malformed id is rejected by the
        store and surfaces as StorageError.

        Raises:
            NotFoundError: No instance has this id
            StorageError:  The lookup failed
        """
        try:
            document = await self.store.find_by_id(resource_id)
        except Exception as e:
            raise self._storage_error("fetch", e, resource_id=resource_id) from e

        if document is None:
            raise NotFoundError(
                message=self.definition.not_found_message,
                resource=self.definition.name,
                resource_id=resource_id,
            )

        return self.definition.from_document(document)

    async def create(self, payload: Any) -> ModelT:
        """
        Validate a payload, persist it, and return the stored instance.

        Args:
            payload: Mapping (or pydantic model) of field values; unknown keys are ignored

        Raises:
            ValidationError: A provided value cannot be coerced to its field type
            StorageError:    The insert failed
        """
        result = self.definition.validate(payload)
        if isinstance(result, Invalid):
            raise ValidationError(message=result.reason, context={"errors": result.errors})

        try:
            document = await self.store.insert(self.definition.to_document(result.instance))
        except Exception as e:
            raise self._storage_error("create", e) from e

        logger.info("Created %s %s", self.definition.name, document.get("id"))
        return self.definition.from_document(document)
