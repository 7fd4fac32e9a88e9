"""Resolved protocol-buffer schema tree.

The generator reads these models only. Ownership flows from a container to its
children; every node also keeps a non-owning link to its container, set when the
container is built, which is used for namespace and type lookups.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, PrivateAttr

LOOKUP_KINDS = ("message", "enum")


class SchemaLookupError(LookupError):
    """A dotted type reference did not resolve to any node in the tree."""


class _Owned(BaseModel):
    _parent: Any = PrivateAttr(default=None)

    @property
    def parent(self) -> "Node | None":
        return self._parent


class FieldDef(_Owned):
    """A single message field."""

    name: str
    type: str  # scalar keyword or (dotted) type reference
    rule: Literal["singular", "repeated", "map"] = "singular"
    key_type: str | None = None  # map fields only
    required: bool = False
    default: Any = None
    comment: str | None = None


class EnumValue(BaseModel):
    name: str
    value: int
    comment: str | None = None


class MethodDef(_Owned):
    """A single RPC method of a service."""

    name: str
    request_type: str
    response_type: str
    comment: str | None = None

    @property
    def full_name(self) -> str:
        owner = self.parent.full_name if self.parent is not None else ""
        return f"{owner}.{self.name}"


class Node(_Owned):
    """Common behaviour of every named node in the tree."""

    name: str
    comment: str | None = None

    @property
    def children(self) -> list["Node"]:
        return []

    @property
    def full_name(self) -> str:
        if not self.name:
            return ""
        owner = self.parent.full_name if self.parent is not None else ""
        return f"{owner}.{self.name}"

    @property
    def root(self) -> "Node":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def get(self, name: str, kinds: tuple[str, ...] | None = None) -> "Node | None":
        """Return the direct child called ``name``, optionally restricted to ``kinds``."""
        for child in self.children:
            if child.name == name and (kinds is None or child.kind in kinds):
                return child
        return None

    def lookup(self, path: str, kinds: tuple[str, ...] | None = None) -> "Node":
        """Resolve a dotted type reference relative to this node.

        A leading ``.`` resolves from the root. Otherwise the name is searched in
        this node, then in the namespaces below it, then in each ancestor.
        """
        parts = path.split(".")
        if parts[0] == "":
            found = self.root._find(parts[1:], kinds)
        else:
            found = self._find(parts, kinds)
        if found is None:
            raise SchemaLookupError(f"no such type: {path} (in {self.full_name or '<root>'})")
        return found

    def lookup_type(self, path: str) -> "MessageNode":
        return self.lookup(path, ("message",))

    def lookup_type_or_enum(self, path: str) -> "Node":
        return self.lookup(path, LOOKUP_KINDS)

    def _find(self, parts: list[str], kinds, parent_checked: bool = False) -> "Node | None":
        if not parts or not parts[0]:
            return None
        if len(parts) == 1:
            found = self.get(parts[0], kinds)
            if found is not None:
                return found
        else:
            scope = self.get(parts[0])
            if scope is not None:
                found = scope._find(parts[1:], kinds, True)
                if found is not None:
                    return found

        for child in self.children:
            if child.children:
                found = child._find(parts, kinds, True)
                if found is not None:
                    return found

        if parent_checked or self.parent is None:
            return None
        return self.parent._find(parts, kinds)


class _Container(Node):
    nested: list["SchemaNode"] = []

    @property
    def children(self) -> list[Node]:
        return self.nested

    def model_post_init(self, __context: Any) -> None:
        for child in self.nested:
            child._parent = self


class MessageNode(_Container):
    kind: Literal["message"] = "message"
    fields: list[FieldDef] = []

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        for field in self.fields:
            field._parent = self

    def field(self, name: str) -> FieldDef | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None


class EnumNode(Node):
    kind: Literal["enum"] = "enum"
    values: list[EnumValue] = []


class ServiceNode(Node):
    kind: Literal["service"] = "service"
    methods: list[MethodDef] = []

    def model_post_init(self, __context: Any) -> None:
        for method in self.methods:
            method._parent = self


class NamespaceNode(_Container):
    kind: Literal["namespace"] = "namespace"


class Root(NamespaceNode):
    """The unnamed top-level namespace of a schema tree."""

    name: str = ""


SchemaNode = Annotated[
    Union[MessageNode, EnumNode, ServiceNode, NamespaceNode],
    Field(discriminator="kind"),
]

MessageNode.model_rebuild()
NamespaceNode.model_rebuild()
Root.model_rebuild()


def namespace_of(obj: Node | FieldDef | None) -> str:
    """Dotted prefix of the named ancestors of ``obj``, excluding ``obj`` itself."""
    prefix = ""
    while obj is not None and obj.parent is not None and obj.parent.name:
        prefix = f"{obj.parent.name}.{prefix}"
        obj = obj.parent
    return prefix


def qualified_name(node: Node) -> str:
    return f"{namespace_of(node)}{node.name}"
