import pytest

from compilertoolkit.linearscan import NotConfiguredError
from compilertoolkit.regalloc import RegisterAllocator

SEPARATOR = "-" * 40


def _add(alloc, vertex, *edges):
    for edge in edges:
        alloc.add_edge(edge)
    alloc.add_vertex(vertex)


def _triangle(colors=3, graph_id=1):
    alloc = RegisterAllocator()
    alloc.set_graph_id(graph_id)
    alloc.set_colors(colors)
    _add(alloc, 3, 4, 5)
    _add(alloc, 4, 5)
    return alloc


def _assert_proper(alloc, k):
    for vertex, color in alloc.coloring.items():
        assert color is not None
        assert 0 <= color < k
        for neighbour in alloc.adjacency[vertex]:
            if neighbour == vertex:
                continue
            if neighbour < alloc.colors:
                assert color != neighbour
            elif neighbour in alloc.coloring:
                assert color != alloc.coloring[neighbour]


def test_not_configured_reports_nothing():
    alloc = RegisterAllocator()
    assert alloc.evaluate_colorings() == ""
    assert alloc.describe_settings() == ""
    assert alloc.summary() == ""


def test_color_without_configuration_raises():
    alloc = RegisterAllocator()
    _add(alloc, 3, 4)
    with pytest.raises(NotConfiguredError):
        alloc.color(2)


def test_describe_settings_format():
    alloc = RegisterAllocator()
    alloc.set_graph_id(7)
    alloc.set_colors(3)
    assert alloc.describe_settings() == (
        "Graph 7 -> Physical Registers: 3\n" + SEPARATOR + "\n"
    )


def test_edges_are_symmetric():
    alloc = _triangle()
    for vertex, neighbours in alloc.adjacency.items():
        for neighbour in neighbours:
            assert vertex in alloc.adjacency[neighbour]
    assert set(alloc.adjacency) == {3, 4, 5}


def test_existing_vertex_merges_edges():
    alloc = RegisterAllocator()
    alloc.set_graph_id(1)
    alloc.set_colors(2)
    _add(alloc, 3, 4)
    _add(alloc, 3, 5)
    assert alloc.adjacency[3] == {4, 5}
    assert alloc.adjacency[5] == {3}


def test_triangle_colors_with_three():
    alloc = _triangle()
    transcript = alloc.color(3)
    assert transcript.startswith(SEPARATOR + "\nK = 3\n\n")
    assert alloc.results[3] is True
    assert set(alloc.coloring) == {3, 4, 5}
    assert len(set(alloc.coloring.values())) == 3
    _assert_proper(alloc, 3)
    assert "NO COLOR AVAILABLE" not in transcript


def test_triangle_spills_with_two():
    alloc = _triangle()
    transcript = alloc.color(2)
    assert "NO COLOR AVAILABLE" in transcript
    assert "Push: 3 *\n" in transcript
    assert alloc.results[2] is False
    assert None in alloc.coloring.values()


def test_each_virtual_pushed_once():
    alloc = _triangle()
    transcript = alloc.color(3)
    pushes = [line for line in transcript.splitlines() if line.startswith("Push:")]
    pops = [line for line in transcript.splitlines() if line.startswith("Pop:")]
    assert len(pushes) == 3
    assert len(pops) == 3


def test_graph_restored_after_coloring():
    alloc = _triangle()
    before = alloc.describe_graph()
    alloc.color(2)
    alloc.color(3)
    assert alloc.describe_graph() == before


def test_physical_neighbour_color_avoided():
    alloc = RegisterAllocator()
    alloc.set_graph_id(1)
    alloc.set_colors(2)
    _add(alloc, 2, 0)
    alloc.color(2)
    assert alloc.results[2] is True
    assert alloc.coloring[2] != 0
    _assert_proper(alloc, 2)


def test_k_out_of_range_raises():
    alloc = _triangle()
    with pytest.raises(ValueError):
        alloc.color(4)
    with pytest.raises(ValueError):
        alloc.color(0)


def test_negative_settings_raise():
    alloc = RegisterAllocator()
    with pytest.raises(ValueError):
        alloc.set_colors(-1)
    with pytest.raises(ValueError):
        alloc.set_graph_id(-2)


def test_evaluate_and_summary():
    alloc = _triangle()
    report = alloc.evaluate_colorings()
    assert "K = 3\n\n" in report
    assert "K = 2\n\n" in report
    assert report.endswith(SEPARATOR + "\n")
    summary = alloc.summary()
    assert summary.startswith(SEPARATOR)
    assert "\nGraph 1 -> K = 3: Successful Allocation" in summary
    assert "\nGraph 1 -> K = 2: SPILL" in summary


def test_summary_aligns_numbers():
    alloc = RegisterAllocator()
    alloc.set_graph_id(4)
    alloc.set_colors(10)
    summary = alloc.summary()
    assert "\nGraph 4 -> K = 10: Successful Allocation" in summary
    assert "\nGraph 4 -> K =  9: Successful Allocation" in summary
    assert "K =  1" not in summary


def test_describe_graph_header():
    alloc = _triangle()
    text = alloc.describe_graph()
    assert text.startswith("== GRAFO ==\n")
    assert len(text.splitlines()) == 1 + len(alloc.adjacency)