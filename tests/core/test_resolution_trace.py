# tests/core/test_resolution_trace.py
"""
Testes da trilha estruturada de resolução.
"""

from ion_hive_serde.core.trace import ResolutionTrace


def test_log_adds_session_and_timestamp():
    trace = ResolutionTrace(session_id="s1")

    trace.log(component="encoding", level="info", message="policy resolved", value="TEXT")

    event = trace.events[0]
    assert event["session_id"] == "s1"
    assert event["value"] == "TEXT"
    assert "timestamp" in event


def test_warnings_are_grouped_and_logged():
    trace = ResolutionTrace()

    trace.add_warning(component="options", message="one")
    trace.add_warning(component="options", message="two")

    assert trace.warnings == {"options": ["one", "two"]}
    assert [e["level"] for e in trace.events_for("options")] == ["warning", "warning"]


def test_traces_do_not_share_state():
    a = ResolutionTrace()
    b = ResolutionTrace()

    a.add_warning(component="x", message="only a")

    assert b.events == [] and b.warnings == {}
