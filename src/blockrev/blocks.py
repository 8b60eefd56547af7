"""Block tree model.

A document is an ordered tuple of blocks.  Each block is a frozen dataclass
carrying a stable ``id`` that survives edits of the same logical block.
Containers nest exactly one level: a :class:`ColumnsBlock` holds
:class:`Column` objects whose children are :data:`LeafBlock` values, and
``LeafBlock`` does not include ``ColumnsBlock``.

The wire form is the JSON shape persisted in revision records::

    {"id": "b1", "type": "columns", "gap": "md", "columns": [
        {"id": "c1", "blocks": [{"id": "b2", "type": "content", "text": "<p>hi</p>"}]}
    ]}

Field names are camelCase on the wire and unset optional fields are
omitted.  :func:`parse_tree` and :func:`serialize_tree` convert between the
two forms.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar, Union

from blockrev.errors import BlockrevValidationError

DEFAULT_ASSET_ADDRESS = (
    "resource_rdx1tknxxxxxxxxxradxrdxxxxxxxxx009923554798xxxxxxxxxradxrd"
)
"""Resource address used by :func:`create_block` for new asset-price blocks."""

COLUMN_WIDTHS: tuple[str, ...] = ("auto", "1/2", "1/3", "2/3", "1/4", "3/4")
COLUMN_GAPS: tuple[str, ...] = ("sm", "md", "lg")
COLUMN_ALIGNS: tuple[str, ...] = ("start", "center", "end", "stretch")


class BlockType(str, Enum):
    """Wire ``type`` tag of each block variant."""

    CONTENT = "content"
    RECENT_PAGES = "recentPages"
    PAGE_LIST = "pageList"
    ASSET_PRICE = "assetPrice"
    TOC = "toc"
    COLUMNS = "columns"


# ---------------------------------------------------------------------------
# Wire helpers
# ---------------------------------------------------------------------------

def _wire(name: str) -> dict[str, str]:
    return {"wire": name}


def to_wire_value(value: Any) -> Any:
    """Convert a field value (tuples, columns, blocks) to its JSON form."""
    if isinstance(value, (tuple, list)):
        return [to_wire_value(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def _dump_fields(obj: Any) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        data[f.metadata.get("wire", f.name)] = to_wire_value(value)
    return data


class _BlockBase:
    """Serialisation shared by every block variant."""

    type: ClassVar[BlockType]

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of this block (``id`` and ``type`` first)."""
        body = _dump_fields(self)
        data: dict[str, Any] = {"id": body.pop("id"), "type": self.type.value}
        data.update(body)
        return data


# ---------------------------------------------------------------------------
# Leaf variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ContentBlock(_BlockBase):
    """Rich-text content stored as HTML."""

    id: str
    text: str = ""

    type: ClassVar[BlockType] = BlockType.CONTENT


@dataclass(frozen=True)
class RecentPagesBlock(_BlockBase):
    """Lists the most recently edited pages, optionally under one tag path."""

    id: str
    limit: int = 5
    tag_path: str | None = field(default=None, metadata=_wire("tagPath"))

    type: ClassVar[BlockType] = BlockType.RECENT_PAGES


@dataclass(frozen=True)
class PageListBlock(_BlockBase):
    """A hand-picked, ordered list of pages."""

    id: str
    page_ids: tuple[str, ...] = field(default=(), metadata=_wire("pageIds"))

    type: ClassVar[BlockType] = BlockType.PAGE_LIST

    def __post_init__(self) -> None:
        object.__setattr__(self, "page_ids", tuple(self.page_ids))


@dataclass(frozen=True)
class AssetPriceBlock(_BlockBase):
    """Price ticker for an on-ledger resource."""

    id: str
    resource_address: str | None = field(default=None, metadata=_wire("resourceAddress"))
    show_change: bool | None = field(default=None, metadata=_wire("showChange"))

    type: ClassVar[BlockType] = BlockType.ASSET_PRICE


@dataclass(frozen=True)
class TocBlock(_BlockBase):
    """Table of contents generated from the page headings."""

    id: str

    type: ClassVar[BlockType] = BlockType.TOC


LeafBlock = Union[ContentBlock, RecentPagesBlock, PageListBlock, AssetPriceBlock, TocBlock]
"""Any block allowed inside a column."""

LEAF_BLOCK_CLASSES: tuple[type, ...] = (
    ContentBlock,
    RecentPagesBlock,
    PageListBlock,
    AssetPriceBlock,
    TocBlock,
)


# ---------------------------------------------------------------------------
# Container variant
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Column:
    """One column of a :class:`ColumnsBlock`.  Holds leaf blocks only."""

    id: str
    blocks: tuple[LeafBlock, ...] = ()
    width: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))
        for block in self.blocks:
            if not isinstance(block, LEAF_BLOCK_CLASSES):
                raise BlockrevValidationError(
                    "columns may only contain leaf blocks",
                    context={"column_id": self.id, "reason": "nested_container",
                             "value": type(block).__name__},
                )

    def to_dict(self) -> dict[str, Any]:
        return _dump_fields(self)


@dataclass(frozen=True)
class ColumnsBlock(_BlockBase):
    """Side-by-side layout container."""

    id: str
    columns: tuple[Column, ...] = ()
    gap: str | None = None
    align: str | None = None

    type: ClassVar[BlockType] = BlockType.COLUMNS

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))


Block = Union[LeafBlock, ColumnsBlock]
"""Any block allowed at the top level of a document."""

_CLASS_BY_TYPE: dict[str, type] = {
    cls.type.value: cls
    for cls in (*LEAF_BLOCK_CLASSES, ColumnsBlock)
}

INSERTABLE_BLOCK_TYPES: tuple[BlockType, ...] = (
    BlockType.CONTENT,
    BlockType.COLUMNS,
    BlockType.RECENT_PAGES,
    BlockType.PAGE_LIST,
    BlockType.ASSET_PRICE,
)
"""Block types offered when inserting a new block into a document."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _invalid(path: str, reason: str, value: Any = None) -> BlockrevValidationError:
    return BlockrevValidationError(
        f"invalid block at {path}: {reason}",
        context={"path": path, "reason": reason, "value": value},
    )


def _optional_str(data: dict[str, Any], key: str, path: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise _invalid(path, f"{key} must be a string", value)
    return value


def _optional_choice(
    data: dict[str, Any], key: str, path: str, choices: tuple[str, ...],
) -> str | None:
    value = data.get(key)
    if value is not None and value not in choices:
        raise _invalid(path, f"{key} must be one of {', '.join(choices)}", value)
    return value


def _parse_leaf_fields(cls: type, data: dict[str, Any], path: str) -> dict[str, Any]:
    """Validate and extract the constructor kwargs of a leaf variant."""
    if cls is ContentBlock:
        text = data.get("text")
        if not isinstance(text, str):
            raise _invalid(path, "content.text must be a string", text)
        return {"text": text}

    if cls is RecentPagesBlock:
        limit = data.get("limit")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise _invalid(path, "recentPages.limit must be a positive integer", limit)
        return {"limit": limit, "tag_path": _optional_str(data, "tagPath", path)}

    if cls is PageListBlock:
        page_ids = data.get("pageIds")
        if not isinstance(page_ids, list) or not all(isinstance(p, str) for p in page_ids):
            raise _invalid(path, "pageList.pageIds must be a list of strings", page_ids)
        return {"page_ids": tuple(page_ids)}

    if cls is AssetPriceBlock:
        show_change = data.get("showChange")
        if show_change is not None and not isinstance(show_change, bool):
            raise _invalid(path, "assetPrice.showChange must be a boolean", show_change)
        return {
            "resource_address": _optional_str(data, "resourceAddress", path),
            "show_change": show_change,
        }

    return {}


def _parse_column(data: Any, path: str) -> Column:
    if not isinstance(data, dict):
        raise _invalid(path, "column must be an object", data)
    column_id = data.get("id")
    if not isinstance(column_id, str):
        raise _invalid(path, "column.id must be a string", column_id)
    raw_blocks = data.get("blocks")
    if not isinstance(raw_blocks, list):
        raise _invalid(path, "column.blocks must be a list", raw_blocks)
    blocks = tuple(
        block_from_dict(raw, path=f"{path}.blocks.{k}", allow_container=False)
        for k, raw in enumerate(raw_blocks)
    )
    return Column(
        id=column_id,
        blocks=blocks,
        width=_optional_choice(data, "width", path, COLUMN_WIDTHS),
    )


def block_from_dict(
    data: Any,
    *,
    path: str = "root.0",
    allow_container: bool = True,
) -> Block:
    """Build a typed block from its wire dict.

    Parameters
    ----------
    data:
        The wire form of one block.
    path:
        Structural path reported in validation errors.
    allow_container:
        ``False`` when parsing the children of a column, where a
        ``columns`` block is rejected.

    Raises
    ------
    BlockrevValidationError
        If *data* does not match the block schema.
    """
    if not isinstance(data, dict):
        raise _invalid(path, "block must be an object", data)
    block_id = data.get("id")
    if not isinstance(block_id, str):
        raise _invalid(path, "block.id must be a string", block_id)
    block_type = data.get("type")
    cls = _CLASS_BY_TYPE.get(block_type) if isinstance(block_type, str) else None
    if cls is None:
        raise _invalid(path, "unknown block type", block_type)

    if cls is ColumnsBlock:
        if not allow_container:
            raise _invalid(path, "columns cannot be nested inside a column", "columns")
        raw_columns = data.get("columns")
        if not isinstance(raw_columns, list):
            raise _invalid(path, "columns.columns must be a list", raw_columns)
        return ColumnsBlock(
            id=block_id,
            columns=tuple(
                _parse_column(raw, f"{path}.columns.{j}")
                for j, raw in enumerate(raw_columns)
            ),
            gap=_optional_choice(data, "gap", path, COLUMN_GAPS),
            align=_optional_choice(data, "align", path, COLUMN_ALIGNS),
        )

    return cls(id=block_id, **_parse_leaf_fields(cls, data, path))


def parse_tree(data: Any, *, base_path: str = "root") -> tuple[Block, ...]:
    """Parse a serialised block list into a tuple of typed blocks.

    ``None`` yields an empty tree.

    Raises
    ------
    BlockrevValidationError
        If *data* is not a list or any entry is malformed.
    """
    if data is None:
        return ()
    if not isinstance(data, list):
        raise _invalid(base_path, "block tree must be a list", type(data).__name__)
    return tuple(
        block_from_dict(raw, path=f"{base_path}.{i}")
        for i, raw in enumerate(data)
    )


def validate_blocks(data: Any) -> bool:
    """Return ``True`` if *data* is a well-formed serialised block list."""
    if not isinstance(data, list):
        return False
    try:
        parse_tree(data)
    except BlockrevValidationError:
        return False
    return True


def block_to_dict(block: Block) -> dict[str, Any]:
    """Return the wire form of *block*."""
    return block.to_dict()


def serialize_tree(tree: Any) -> list[dict[str, Any]]:
    """Return the wire form of a block tree.  ``None`` yields ``[]``."""
    return [block.to_dict() for block in tree or ()]


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------

def _new_id() -> str:
    return str(uuid.uuid4())


def create_block(block_type: BlockType | str, *, id: str | None = None) -> Block:
    """Create a block of *block_type* populated with editor defaults."""
    kind = BlockType(block_type)
    block_id = id or _new_id()
    if kind is BlockType.CONTENT:
        return ContentBlock(id=block_id, text="")
    if kind is BlockType.RECENT_PAGES:
        return RecentPagesBlock(id=block_id, limit=5)
    if kind is BlockType.PAGE_LIST:
        return PageListBlock(id=block_id, page_ids=())
    if kind is BlockType.ASSET_PRICE:
        return AssetPriceBlock(
            id=block_id, resource_address=DEFAULT_ASSET_ADDRESS, show_change=True,
        )
    if kind is BlockType.TOC:
        return TocBlock(id=block_id)
    return ColumnsBlock(
        id=block_id,
        columns=(Column(id=_new_id()), Column(id=_new_id())),
        gap="md",
        align="start",
    )


def duplicate_block(block: Block) -> Block:
    """Copy *block* with fresh identities, including columns and children."""
    if isinstance(block, ColumnsBlock):
        return replace(
            block,
            id=_new_id(),
            columns=tuple(
                replace(
                    column,
                    id=_new_id(),
                    blocks=tuple(replace(child, id=_new_id()) for child in column.blocks),
                )
                for column in block.columns
            ),
        )
    return replace(block, id=_new_id())


def has_code_blocks(tree: Any) -> bool:
    """Return ``True`` if any content block (nested ones included) holds a ``<pre`` element."""
    for block in tree or ():
        if isinstance(block, ContentBlock) and "<pre" in block.text:
            return True
        if isinstance(block, ColumnsBlock):
            for column in block.columns:
                if has_code_blocks(column.blocks):
                    return True
    return False
