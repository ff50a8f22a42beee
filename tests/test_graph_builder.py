"""Tests for dependency graph construction."""

import pytest

from codeflow_cli.collector import collect_files
from codeflow_cli.extractor import extract
from codeflow_cli.graph_builder import build_graph
from codeflow_cli.models import ExtractionResult, FileRecord


def _build(root, **kwargs):
    records = collect_files(root)
    records.sort(key=lambda r: r.name)
    return records, build_graph(records, [extract(r.content) for r in records], **kwargs)


def _ids(graph):
    return {node.label: node.node_id for node in graph.files}


def test_one_file_node_per_record(sample_project_path):
    records, graph = _build(sample_project_path)
    assert sorted(n.label for n in graph.files) == sorted(r.name for r in records)
    assert all(n.kind == "file" for n in graph.files)


def test_resolved_imports_become_file_edges(sample_project_path):
    _, graph = _build(sample_project_path)
    ids = _ids(graph)
    pairs = {(e.src, e.dst) for e in graph.file_edges()}

    assert pairs == {
        (ids["index.js"], ids["src/service.ts"]),
        (ids["src/service.ts"], ids["src/utils.ts"]),
        (ids["src/service.ts"], ids["src/models/index.ts"]),
    }
    assert graph.outgoing[ids["src/service.ts"]] == 2
    assert graph.incoming[ids["src/service.ts"]] == 1
    assert graph.incoming[ids["index.js"]] == 0


def test_external_packages(sample_project_path):
    _, graph = _build(sample_project_path)
    assert set(graph.externals) == {"express", "axios"}
    assert graph.externals["express"].node_id == "ext_express"
    assert graph.externals["express"].kind == "external"
    assert len(graph.external_edges()) == 2


def test_unresolved_relative_import_is_dropped(sample_project_path):
    _, graph = _build(sample_project_path)
    legacy = _ids(graph)["src/legacy.js"]
    assert [e for e in graph.edges if e.src == legacy] == []
    assert "./missing" not in graph.externals


def test_symbols_and_fallback_nodes(sample_project_path):
    _, graph = _build(sample_project_path)
    ids = _ids(graph)

    service = [n.label for n in graph.symbols[ids["src/service.ts"]]]
    assert service == ["fn: fetchUser", "class: Service"]
    assert all(n.parent == ids["src/service.ts"] for n in graph.symbols[ids["src/service.ts"]])

    readme = graph.symbols[ids["README.md"]]
    assert len(readme) == 1
    assert readme[0].kind == "fallback"
    assert readme[0].label == "README.md (3 lines)"


def test_symbol_cap_and_dedupe(make_tree):
    body = "".join(f"function f{i}() {{}}\n" for i in range(12)) + "function f0() {}\n"
    body += "".join(f"class C{i} {{}}\n" for i in range(10))
    root = make_tree({"big.ts": body})
    _, graph = _build(root, max_symbols=8)

    nodes = graph.symbols[graph.files[0].node_id]
    functions = [n.label for n in nodes if n.kind == "function"]
    classes = [n.label for n in nodes if n.kind == "class"]
    assert functions == [f"fn: f{i}" for i in range(8)]
    assert len(classes) == 8


def test_duplicate_imports_keep_multiplicity(make_tree):
    root = make_tree({"a.ts": 'import "./b";\nrequire("./b");\n', "b.ts": ""})
    _, graph = _build(root)
    ids = _ids(graph)
    assert len(graph.file_edges()) == 2
    assert graph.incoming[ids["b.ts"]] == 2


def test_self_import_is_kept(make_tree):
    root = make_tree({"a.ts": 'import "./a";\n'})
    _, graph = _build(root)
    fid = graph.files[0].node_id
    assert [(e.src, e.dst) for e in graph.file_edges()] == [(fid, fid)]


def test_import_of_ignored_file_is_dropped(make_tree):
    root = make_tree({"a.ts": 'import "./dist/x";\n', "dist/x.ts": ""})
    _, graph = _build(root)
    assert graph.edges == []


def test_label_collisions_are_exposed(make_tree):
    root = make_tree({"a.ts": "", "a_ts": ""})
    _, graph = _build(root)
    assert len({n.node_id for n in graph.files}) == 2
    assert graph.collisions[0].label == "a_ts"
    assert graph.collisions[0].existing_label == "a.ts"


def test_mismatched_inputs_raise():
    record = FileRecord(path="/x/a.ts", name="a.ts", content="", line_count=0)
    with pytest.raises(ValueError):
        build_graph([record], [ExtractionResult(), ExtractionResult()])


def _all_node_ids(graph):
    ids = [n.node_id for n in graph.files]
    ids += [n.node_id for nodes in graph.symbols.values() for n in nodes]
    ids += [n.node_id for n in graph.externals.values()]
    return ids


def test_fallback_label_matching_another_file_is_not_merged(make_tree):
    root = make_tree({"Makefile": "all:\n", "Makefile_file": "x\n"})
    _, graph = _build(root)
    ids = _all_node_ids(graph)

    assert len(ids) == len(set(ids))
    assert {n.node_id for n in graph.files} == {"Makefile", "Makefile_file"}
    assert graph.symbols["Makefile"][0].node_id == "Makefile_file_2"
    assert [c.assigned_id for c in graph.collisions] == ["Makefile_file_2"]


def test_external_label_matching_a_file_is_not_merged(make_tree):
    root = make_tree({"a.ts": 'import "react";\n', "ext_react": "x\n"})
    _, graph = _build(root)
    ids = _all_node_ids(graph)

    assert len(ids) == len(set(ids))
    ext = graph.externals["react"]
    assert ext.node_id == "ext_react_2"
    assert [(e.src, e.dst) for e in graph.external_edges()] == [("a_ts", "ext_react_2")]
    assert any(c.label == "ext_react" and c.assigned_id == "ext_react_2" for c in graph.collisions)
