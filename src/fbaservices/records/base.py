"""Base class for records mirroring the remote workspace schema.

Records are Pydantic models with three kinds of fields, tagged through
`json_schema_extra["kind"]`:

    * ``attribute``: plain typed value with an optional default
    * ``child``: list of subobject records owned by this record
    * ``link``: reference string pointing at another workspace object

Each child keeps a weak reference to its parent. A record's `reference` is
derived from its parent's reference plus its own path segment
(``<parent>/<collection>/id/<id>``); top-level records carry the workspace
reference they were loaded from. The derived value is cached on first access
and dropped when the id or the parent changes.
"""
from __future__ import annotations

import weakref
from typing import Any, ClassVar, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic_core import PydanticUndefined

ATTRIBUTE = "attribute"
CHILD = "child"
LINK = "link"


class RecordError(Exception):
    """Raised when the record graph is used inconsistently."""


def attribute(
    default: Any = PydanticUndefined,
    *,
    default_factory: Any = None,
    print_order: int = -1,
    description: str | None = None,
) -> Any:
    """Declare an attribute field. No default means the field is required."""
    return Field(
        default=default,
        default_factory=default_factory,
        description=description,
        json_schema_extra={"kind": ATTRIBUTE, "print_order": print_order},
    )


def subobject(*, print_order: int = -1) -> Any:
    return Field(
        default_factory=list,
        json_schema_extra={"kind": CHILD, "print_order": print_order},
    )


def link(*, print_order: int = -1) -> Any:
    return Field(
        default=None,
        json_schema_extra={"kind": LINK, "print_order": print_order},
    )


def _type_name(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is list:
        return "list"
    args = [a for a in get_args(annotation) if a is not type(None)]
    if origin is not None and len(args) == 1:
        return _type_name(args[0])
    return getattr(annotation, "__name__", str(annotation))


class BaseObject(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="allow")

    object_type: ClassVar[str] = ""
    module: ClassVar[str] = ""
    class_name: ClassVar[str] = ""
    top: ClassVar[bool] = False
    # path segment under the parent, e.g. "features"
    collection: ClassVar[str] = ""

    _parent: Any = PrivateAttr(default=None)
    _cached_reference: str | None = PrivateAttr(default=None)
    _workspace_ref: str | None = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for name in self._field_names(CHILD):
            self._link_children(name)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name == "id":
            self.clear_reference()
        elif name in self._field_names(CHILD):
            self._link_children(name)

    # ---- metadata tables ----

    @classmethod
    def _field_names(cls, kind: str) -> list[str]:
        return [
            name
            for name, info in cls.model_fields.items()
            if (info.json_schema_extra or {}).get("kind", ATTRIBUTE) == kind
        ]

    @classmethod
    def _describe(cls, name: str) -> dict[str, Any]:
        info = cls.model_fields[name]
        extra = info.json_schema_extra or {}
        entry: dict[str, Any] = {
            "name": name,
            "type": _type_name(info.annotation),
            "req": info.is_required(),
            "print_order": extra.get("print_order", -1),
        }
        if info.default_factory is not None:
            entry["default"] = info.default_factory()
        elif info.default is not PydanticUndefined and info.default is not None:
            entry["default"] = info.default
        if extra.get("kind") == CHILD:
            child_cls = get_args(info.annotation)[0]
            entry["class"] = child_cls.class_name
            entry["module"] = child_cls.module
        return entry

    @classmethod
    def _table(cls, kind: str, key: str | None) -> Any:
        names = cls._field_names(kind)
        if key is None:
            return [cls._describe(n) for n in names]
        if key not in names:
            return None
        return cls._describe(key)

    @classmethod
    def attributes(cls, key: str | None = None) -> Any:
        return cls._table(ATTRIBUTE, key)

    @classmethod
    def subobjects(cls, key: str | None = None) -> Any:
        return cls._table(CHILD, key)

    @classmethod
    def links(cls, key: str | None = None) -> Any:
        return cls._table(LINK, key)

    # ---- object graph ----

    @property
    def parent(self) -> BaseObject | None:
        if self._parent is None:
            return None
        return self._parent()

    def set_parent(self, value: BaseObject | None) -> None:
        """Attach to `value` through a weak reference (None detaches)."""
        self._parent = weakref.ref(value) if value is not None else None
        self.clear_reference()

    def _link_children(self, name: str) -> None:
        for child in getattr(self, name):
            child.set_parent(self)

    def add(self, collection: str, data: dict[str, Any] | BaseObject) -> BaseObject:
        """Append a child record (built from `data` if needed) to `collection`."""
        if collection not in self._field_names(CHILD):
            raise RecordError(f"{self.class_name} has no subobject '{collection}'")
        child_cls = get_args(type(self).model_fields[collection].annotation)[0]
        child = data if isinstance(data, BaseObject) else child_cls.model_validate(data)
        if not isinstance(child, child_cls):
            raise RecordError(f"'{collection}' holds {child_cls.__name__} records")
        getattr(self, collection).append(child)
        child.set_parent(self)
        return child

    def children(self, collection: str) -> list[BaseObject]:
        if collection not in self._field_names(CHILD):
            raise RecordError(f"{self.class_name} has no subobject '{collection}'")
        return list(getattr(self, collection))

    # ---- derived identifiers ----

    @property
    def reference(self) -> str:
        if self._cached_reference is None:
            self._cached_reference = self._build_reference()
        return self._cached_reference

    @property
    def uuid(self) -> str:
        return self.reference

    def _build_reference(self) -> str:
        if self.top:
            if not self._workspace_ref:
                raise RecordError(f"{self.object_type} has no workspace reference")
            return self._workspace_ref
        parent = self.parent
        if parent is None:
            raise RecordError(f"{self.object_type} '{getattr(self, 'id', '?')}' has no parent")
        return f"{parent.reference}/{self.collection}/id/{getattr(self, 'id')}"

    def clear_reference(self) -> None:
        self._cached_reference = None
        for name in self._field_names(CHILD):
            for child in getattr(self, name):
                child.clear_reference()

    # ---- serialization ----

    @classmethod
    def from_workspace(cls, data: dict[str, Any], ref: str | None = None) -> BaseObject:
        """Build a record from its serialized workspace representation."""
        obj = cls.model_validate(data)
        if ref is not None:
            if not cls.top:
                raise RecordError(f"{cls.object_type} is not a top-level object")
            obj._workspace_ref = ref
        return obj

    def to_workspace(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


__all__ = ["BaseObject", "RecordError", "attribute", "link", "subobject"]
