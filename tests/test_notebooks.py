"""Tests for notebook listing and tree building."""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from peeker.core.joplin import JoplinClient, UpstreamProtocolError, UpstreamUnreachable
from peeker.core.notebooks import (
    build_notebook_tree,
    fetch_all_notebooks,
    fetch_notebook_notes,
    get_notebook_tree,
)
from peeker.models import ROOT_NOTEBOOK_ID, NotebookNode, NotebookRecord


def rec(id: str, title: str, parent_id: str = "", note_count: int = 0) -> NotebookRecord:
    return NotebookRecord(id=id, title=title, parent_id=parent_id, note_count=note_count)


def child_ids(node: NotebookNode) -> list[str]:
    return [child.id for child in node.children]


def all_ids(node: NotebookNode) -> set[str]:
    return {n.id for _, n in node.walk()}


class TestNotebookRecord:
    """Tests for building records from upstream items."""

    def test_from_api_response(self):
        record = NotebookRecord.from_api_response(
            {"id": "a", "title": "Work", "parent_id": "p", "note_count": 3}
        )

        assert record == NotebookRecord(id="a", title="Work", parent_id="p", note_count=3)

    def test_missing_fields_default(self):
        record = NotebookRecord.from_api_response({"id": "a"})

        assert record.title == ""
        assert record.parent_id == ""
        assert record.note_count == 0

    def test_ill_typed_fields_default(self):
        record = NotebookRecord.from_api_response(
            {"id": 12, "title": None, "parent_id": ["x"], "note_count": "7"}
        )

        assert record == NotebookRecord(id="", title="", parent_id="", note_count=0)

    def test_non_dict_item(self):
        assert NotebookRecord.from_api_response("junk") == NotebookRecord(id="", title="")


class TestBuildNotebookTree:
    """Tests for build_notebook_tree()."""

    def test_empty(self):
        root = build_notebook_tree([])

        assert root.id == ROOT_NOTEBOOK_ID
        assert root.title == ROOT_NOTEBOOK_ID
        assert root.parent_id == ""
        assert root.children == []

    def test_children_sorted_by_title(self):
        root = build_notebook_tree([rec("a", "B"), rec("b", "A")])

        assert child_ids(root) == ["b", "a"]
        assert [c.title for c in root.children] == ["A", "B"]

    def test_sort_is_case_sensitive(self):
        root = build_notebook_tree([rec("1", "b"), rec("2", "B"), rec("3", "a")])

        assert [c.title for c in root.children] == ["B", "a", "b"]

    def test_equal_titles_keep_input_order(self):
        root = build_notebook_tree([rec("first", "Same"), rec("second", "Same")])

        assert child_ids(root) == ["first", "second"]

    def test_nested(self):
        root = build_notebook_tree(
            [
                rec("work", "Work"),
                rec("proj", "Projects", "work"),
                rec("meet", "Meetings", "work"),
                rec("q1", "Q1", "meet"),
            ]
        )

        work = root.children[0]
        assert work.id == "work"
        assert work.parent_id == ""
        assert child_ids(work) == ["meet", "proj"]
        assert child_ids(work.children[0]) == ["q1"]
        assert work.children[0].children[0].parent_id == "meet"

    def test_dangling_parent_dropped(self):
        root = build_notebook_tree(
            [
                rec("a", "Kept"),
                rec("lost", "Lost", "does-not-exist"),
                rec("lost-child", "Lost child", "lost"),
            ]
        )

        assert all_ids(root) == {ROOT_NOTEBOOK_ID, "a"}

    def test_cycle_dropped(self):
        root = build_notebook_tree(
            [rec("a", "Kept"), rec("x", "X", "y"), rec("y", "Y", "x")]
        )

        assert all_ids(root) == {ROOT_NOTEBOOK_ID, "a"}

    def test_self_parent_dropped(self):
        root = build_notebook_tree([rec("s", "Self", "s")])

        assert root.children == []

    def test_duplicate_ids_placed_once(self):
        root = build_notebook_tree([rec("a", "A"), rec("a", "A again", "a")])

        assert child_ids(root) == ["a"]
        assert root.children[0].title == "A"
        assert root.children[0].children == []

    def test_duplicate_id_reachable_record_placed(self):
        root = build_notebook_tree(
            [rec("a", "Dangling", "missing"), rec("a", "Attached")]
        )

        assert child_ids(root) == ["a"]
        assert root.children[0].title == "Attached"
        assert root.children[0].parent_id == ""

    def test_record_claiming_root_id_ignored(self):
        root = build_notebook_tree([rec(ROOT_NOTEBOOK_ID, "Impostor"), rec("a", "A")])

        assert root.title == ROOT_NOTEBOOK_ID
        assert child_ids(root) == ["a"]

    def test_note_counts_not_aggregated(self):
        root = build_notebook_tree(
            [rec("p", "Parent", note_count=2), rec("c", "Child", "p", note_count=5)]
        )

        parent = root.children[0]
        assert root.note_count == 0
        assert parent.note_count == 2
        assert parent.children[0].note_count == 5

    def test_deep_hierarchy(self):
        depth = 3000
        records = [rec("n0", "n0")] + [
            rec(f"n{i}", f"n{i}", f"n{i - 1}") for i in range(1, depth)
        ]

        root = build_notebook_tree(records)

        assert max(level for level, _ in root.walk()) == depth

    def test_input_not_mutated(self):
        records = [rec("a", "B"), rec("b", "A")]

        build_notebook_tree(records)

        assert [r.id for r in records] == ["a", "b"]

    def test_to_dict(self):
        root = build_notebook_tree([rec("a", "Work", note_count=4), rec("b", "Sub", "a")])

        assert root.to_dict() == {
            "id": ROOT_NOTEBOOK_ID,
            "title": ROOT_NOTEBOOK_ID,
            "parent_id": "",
            "n_children": 0,
            "children": [
                {
                    "id": "a",
                    "title": "Work",
                    "parent_id": "",
                    "n_children": 4,
                    "children": [
                        {
                            "id": "b",
                            "title": "Sub",
                            "parent_id": "a",
                            "n_children": 0,
                            "children": [],
                        }
                    ],
                }
            ],
        }


class TestFetchAllNotebooks:
    """Tests for paginated notebook retrieval."""

    def test_two_pages(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folders_page.side_effect = [
            {"items": [{"id": "n1", "title": "One", "parent_id": ""}], "has_more": True},
            {"items": [{"id": "n2", "title": "Two", "parent_id": "n1"}], "has_more": False},
        ]

        notebooks = fetch_all_notebooks(client)

        assert [n.id for n in notebooks] == ["n1", "n2"]
        assert client.get_folders_page.call_count == 2
        assert client.get_folders_page.call_args_list == [call(1), call(2)]

    def test_single_page_without_has_more(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folders_page.return_value = {"items": [{"id": "n1", "title": "One"}]}

        assert [n.id for n in fetch_all_notebooks(client)] == ["n1"]
        assert client.get_folders_page.call_count == 1

    def test_runaway_pagination_fails(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folders_page.return_value = {"items": [], "has_more": True}

        with pytest.raises(UpstreamProtocolError, match="after 5 pages"):
            fetch_all_notebooks(client, max_pages=5)

        assert client.get_folders_page.call_count == 5

    def test_missing_items_fails(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folders_page.return_value = {"has_more": False}

        with pytest.raises(UpstreamProtocolError, match="items"):
            fetch_all_notebooks(client)

    def test_non_boolean_has_more_fails(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folders_page.return_value = {"items": [], "has_more": "false"}

        with pytest.raises(UpstreamProtocolError, match="has_more"):
            fetch_all_notebooks(client)

    def test_page_failure_stops_pagination(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folders_page.side_effect = [
            {"items": [{"id": "n1"}], "has_more": True},
            UpstreamUnreachable("connection refused"),
        ]

        with pytest.raises(UpstreamUnreachable):
            fetch_all_notebooks(client)

        assert client.get_folders_page.call_count == 2

    def test_against_fake_server(self, joplin_client: JoplinClient):
        notebooks = fetch_all_notebooks(joplin_client)

        assert [n.id for n in notebooks] == [
            "nb-work",
            "nb-archive",
            "nb-projects",
            "nb-orphan",
            "nb-meetings",
        ]


class TestGetNotebookTree:
    """Tests for the full notebook tree from the fake server."""

    def test_tree(self, joplin_client: JoplinClient):
        root = get_notebook_tree(joplin_client)

        assert [c.title for c in root.children] == ["Archive", "Work"]
        work = root.children[1]
        assert [c.title for c in work.children] == ["Meetings", "Projects"]
        assert "nb-orphan" not in all_ids(root)


class TestFetchNotebookNotes:
    """Tests for listing the notes of a notebook."""

    def test_sorted_by_title(self, joplin_client: JoplinClient):
        notes = fetch_notebook_notes(joplin_client, "nb-work")

        assert [n.id for n in notes] == ["note1", "note2"]
        assert notes[0].to_dict() == {"id": "note1", "title": "First note"}

    def test_empty_notebook(self, joplin_client: JoplinClient):
        assert fetch_notebook_notes(joplin_client, "nb-archive") == []

    def test_runaway_pagination_fails(self):
        client = MagicMock(spec=JoplinClient)
        client.get_folder_notes_page.return_value = {"items": [], "has_more": True}

        with pytest.raises(UpstreamProtocolError):
            fetch_notebook_notes(client, "nb1", max_pages=3)

        assert client.get_folder_notes_page.call_args_list == [
            call("nb1", 1),
            call("nb1", 2),
            call("nb1", 3),
        ]
