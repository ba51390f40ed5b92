"""
Courseware Backend — Generic Resource Definition
==================================================

What:  Static description of a resource: its name, its URL path, its typed
       field list, and the pydantic models used to accept and return it.
How:   `ResourceDefinition.validate()` turns an untyped payload into an
       explicit `Valid(instance)` or `Invalid(reason)` result at the boundary.
Who:   Consumed by ResourceService (server side) and ResourceClient (client side).

Validation contract:
    - Type checking only, with pydantic's lax coercion ("4.5" → 4.5).
    - No required fields; unknown keys are accepted and dropped.
    - Anything that cannot be coerced produces `Invalid`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Tuple, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class FieldSpec:
    """One declared field: wire name, attribute name, annotation, optionality."""

    name: str
    attribute: str
    annotation: Any
    required: bool


@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    instance: ModelT


@dataclass(frozen=True)
class Invalid:
    reason: str
    errors: List[Dict[str, Any]] = field(default_factory=list)


ValidationResult = Union[Valid, Invalid]


@dataclass(frozen=True)
class ResourceDefinition(Generic[ModelT]):
    """
    A named entity type with a fixed set of typed fields.

    Attributes:
        name:         Singular identifier, e.g. "course"
        path:         Collection path segment, e.g. "courses" (→ /api/courses)
        label:        Display name used in messages, e.g. "Course"
        create_model: Pydantic model a create payload must be assignable to
        read_model:   Pydantic model for persisted instances (create_model + id)
    """

    name: str
    path: str
    label: str
    create_model: Type[BaseModel]
    read_model: Type[ModelT]

    @property
    def fields(self) -> Tuple[FieldSpec, ...]:
        """Declared fields in declaration order."""
        return tuple(
            FieldSpec(
                name=info.alias or attr,
                attribute=attr,
                annotation=info.annotation,
                required=info.is_required(),
            )
            for attr, info in self.create_model.model_fields.items()
        )

    @property
    def field_names(self) -> Tuple[str, ...]:
        """Python attribute names of the declared fields (storage column names)."""
        return tuple(self.create_model.model_fields)

    @property
    def empty_message(self) -> str:
        return f"No {self.path}"

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    def validate(self, payload: Any) -> ValidationResult:
        """
        Check that a bag of key/value pairs is assignable to the field list.

        Returns:
            Valid(instance) with coerced values, or Invalid(reason, errors).
        """
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(by_alias=True, exclude_unset=True)
        if not isinstance(payload, Mapping):
            return Invalid(
                reason=f"{self.label} payload must be an object, got {type(payload).__name__}",
            )

        try:
            instance = self.create_model.model_validate(dict(payload))
        except PydanticValidationError as exc:
            errors = [
                {
                    "field": ".".join(str(part) for part in err["loc"]),
                    "message": err["msg"],
                    "type": err["type"],
                }
                for err in exc.errors()
            ]
            reason = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
            return Invalid(reason=f"Invalid {self.name} payload: {reason}", errors=errors)

        return Valid(instance)

    def to_document(self, instance: BaseModel) -> Dict[str, Any]:
        """Values to persist, keyed by attribute name; unset fields are left out."""
        return instance.model_dump(exclude_unset=True)

    def from_document(self, document: Mapping[str, Any]) -> ModelT:
        """Build the read model from a stored document (must carry `id`)."""
        return self.read_model.model_validate(dict(document))

    def decode(self, data: Any) -> ModelT:
        """Build the read model from a wire (camelCase) JSON object."""
        return self.read_model.model_validate(data)

