"""Tests for blocks.py: block variants, wire parsing and helpers."""

import pytest

from blockrev.blocks import (
    DEFAULT_ASSET_ADDRESS,
    INSERTABLE_BLOCK_TYPES,
    AssetPriceBlock,
    BlockType,
    Column,
    ColumnsBlock,
    ContentBlock,
    PageListBlock,
    RecentPagesBlock,
    TocBlock,
    block_from_dict,
    create_block,
    duplicate_block,
    has_code_blocks,
    parse_tree,
    serialize_tree,
    validate_blocks,
)
from blockrev.errors import BlockrevValidationError, ErrorCode


def _columns_payload():
    return {
        "id": "cols",
        "type": "columns",
        "gap": "md",
        "align": "start",
        "columns": [
            {"id": "c1", "width": "1/2", "blocks": [{"id": "a", "type": "content", "text": "<p>a</p>"}]},
            {"id": "c2", "blocks": [{"id": "t", "type": "toc"}]},
        ],
    }


class TestWireForm:
    def test_content_to_dict(self):
        assert ContentBlock(id="a", text="<p>x</p>").to_dict() == {
            "id": "a", "type": "content", "text": "<p>x</p>",
        }

    def test_camel_case_field_names(self):
        block = RecentPagesBlock(id="r", limit=3, tag_path="guides")
        assert block.to_dict() == {"id": "r", "type": "recentPages", "limit": 3, "tagPath": "guides"}

    def test_unset_optionals_omitted(self):
        assert AssetPriceBlock(id="p").to_dict() == {"id": "p", "type": "assetPrice"}
        assert RecentPagesBlock(id="r").to_dict() == {"id": "r", "type": "recentPages", "limit": 5}

    def test_page_ids_serialised_as_list(self):
        block = PageListBlock(id="l", page_ids=["p1", "p2"])
        assert block.page_ids == ("p1", "p2")
        assert block.to_dict()["pageIds"] == ["p1", "p2"]

    def test_columns_nested_to_dict(self):
        assert block_from_dict(_columns_payload()).to_dict() == _columns_payload()

    def test_serialize_tree_none(self):
        assert serialize_tree(None) == []


class TestParseTree:
    def test_none_is_empty(self):
        assert parse_tree(None) == ()

    def test_empty_list(self):
        assert parse_tree([]) == ()

    def test_all_variants(self):
        tree = parse_tree([
            {"id": "a", "type": "content", "text": "hi"},
            {"id": "b", "type": "recentPages", "limit": 2},
            {"id": "c", "type": "pageList", "pageIds": ["x"]},
            {"id": "d", "type": "assetPrice", "resourceAddress": "res", "showChange": False},
            {"id": "e", "type": "toc"},
            _columns_payload(),
        ])
        assert [type(b) for b in tree] == [
            ContentBlock, RecentPagesBlock, PageListBlock, AssetPriceBlock, TocBlock, ColumnsBlock,
        ]
        assert tree[3].show_change is False
        assert tree[5].columns[0].width == "1/2"
        assert tree[5].columns[1].blocks == (TocBlock(id="t"),)

    def test_not_a_list(self):
        with pytest.raises(BlockrevValidationError) as exc_info:
            parse_tree({"id": "a"})
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.context["path"] == "root"

    def test_unknown_type_reports_path(self):
        with pytest.raises(BlockrevValidationError) as exc_info:
            parse_tree([{"id": "a", "type": "content", "text": ""}, {"id": "b", "type": "video"}])
        assert exc_info.value.context["path"] == "root.1"
        assert exc_info.value.context["value"] == "video"

    def test_nested_columns_rejected(self):
        payload = _columns_payload()
        payload["columns"][0]["blocks"].append({"id": "inner", "type": "columns", "columns": []})
        with pytest.raises(BlockrevValidationError) as exc_info:
            parse_tree([payload])
        assert exc_info.value.context["path"] == "root.0.columns.0.blocks.1"

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "content", "text": "no id"},
            {"id": 5, "type": "content", "text": "x"},
            {"id": "a", "type": "content"},
            {"id": "a", "type": "recentPages", "limit": 0},
            {"id": "a", "type": "recentPages", "limit": True},
            {"id": "a", "type": "pageList", "pageIds": [1]},
            {"id": "a", "type": "assetPrice", "resourceAddress": 3},
            {"id": "a", "type": "assetPrice", "showChange": "yes"},
            {"id": "a", "type": "columns", "columns": "nope"},
            {"id": "a", "type": "columns", "columns": [{"id": "c"}]},
            {"id": "a", "type": "columns", "columns": [], "gap": "xl"},
            "not-an-object",
        ],
    )
    def test_malformed_blocks(self, payload):
        with pytest.raises(BlockrevValidationError):
            block_from_dict(payload)


class TestValidateBlocks:
    def test_valid(self):
        assert validate_blocks([{"id": "a", "type": "toc"}, _columns_payload()]) is True

    def test_invalid(self):
        assert validate_blocks([{"id": "a", "type": "nope"}]) is False

    def test_non_list(self):
        assert validate_blocks(None) is False


class TestNestingCap:
    def test_column_rejects_container(self):
        with pytest.raises(BlockrevValidationError):
            Column(id="c", blocks=(ColumnsBlock(id="inner"),))

    def test_column_accepts_leaves(self):
        column = Column(id="c", blocks=[ContentBlock(id="a")])
        assert column.blocks == (ContentBlock(id="a"),)


class TestCreateBlock:
    def test_defaults(self):
        assert create_block(BlockType.CONTENT, id="a") == ContentBlock(id="a", text="")
        assert create_block("recentPages", id="r") == RecentPagesBlock(id="r", limit=5)
        assert create_block(BlockType.PAGE_LIST, id="l") == PageListBlock(id="l")
        asset = create_block(BlockType.ASSET_PRICE, id="p")
        assert asset.resource_address == DEFAULT_ASSET_ADDRESS
        assert asset.show_change is True

    def test_columns_default_layout(self):
        block = create_block(BlockType.COLUMNS)
        assert isinstance(block, ColumnsBlock)
        assert len(block.columns) == 2
        assert block.columns[0].id != block.columns[1].id
        assert (block.gap, block.align) == ("md", "start")

    def test_fresh_ids(self):
        assert create_block(BlockType.TOC).id != create_block(BlockType.TOC).id

    def test_insertable_excludes_toc(self):
        assert BlockType.TOC not in INSERTABLE_BLOCK_TYPES


class TestDuplicateBlock:
    def test_leaf_gets_new_id(self):
        original = ContentBlock(id="a", text="same")
        copy = duplicate_block(original)
        assert copy.id != "a"
        assert copy.text == "same"

    def test_columns_all_ids_refreshed(self):
        original = block_from_dict(_columns_payload())
        copy = duplicate_block(original)
        old_ids = {"cols", "c1", "c2", "a", "t"}
        new_ids = {copy.id} | {c.id for c in copy.columns} | {
            b.id for c in copy.columns for b in c.blocks
        }
        assert not (old_ids & new_ids)
        assert copy.columns[0].blocks[0].text == "<p>a</p>"


class TestHasCodeBlocks:
    def test_top_level(self):
        assert has_code_blocks([ContentBlock(id="a", text="<pre><code>x</code></pre>")])

    def test_nested(self):
        tree = [ColumnsBlock(id="c", columns=(Column(id="c1", blocks=(ContentBlock(id="a", text="<pre>"),)),))]
        assert has_code_blocks(tree)

    def test_none(self):
        assert not has_code_blocks([ContentBlock(id="a", text="<p>plain</p>"), TocBlock(id="t")])
        assert not has_code_blocks(None)
