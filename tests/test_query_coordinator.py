"""Tests for QueryCoordinator: gating, debouncing, staleness and lifecycle."""

import itertools

import pytest


def fast_config(**overrides):
    from pyqt_livequery.protocols import QueryConfig

    return QueryConfig(min_chars=2, debounce_delay_ms=0).with_overrides(**overrides)


def record_states(coordinator):
    states = []
    coordinator.state_changed.connect(states.append)
    return states


def dispatch(coordinator, backend, text, wait_until):
    """Type text and wait until the backend has received it."""
    expected = len(backend.calls) + 1
    coordinator.on_input(text)
    wait_until(lambda: len(backend.calls) == expected, message=f"dispatch of {text!r}")


# ---------- Input gate ----------

def test_short_input_never_reaches_backend(scripted_backend, make_coordinator):
    """Test below-minimum input is reported as TooShort without a lookup."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import TooShort

    backend = scripted_backend()
    coordinator = make_coordinator(backend, fast_config())

    coordinator.on_input("a")
    assert coordinator.state == TooShort("a", 2)
    for text in ["", "   ", " b ", "x"]:
        coordinator.on_input(text)
    QTest.qWait(50)

    assert backend.calls == []
    assert coordinator.generation == 0
    assert isinstance(coordinator.state, TooShort)


def test_whitespace_only_is_idle(scripted_backend, make_coordinator):
    """Test whitespace-only input returns to Idle with empty text."""
    from pyqt_livequery.core import IDLE

    coordinator = make_coordinator(scripted_backend(), fast_config())
    coordinator.on_input("ab")
    coordinator.on_input("   ")
    assert coordinator.state is IDLE
    assert coordinator.text == ""


def test_short_input_cancels_pending_debounce(scripted_backend, make_coordinator):
    """Test shrinking below the minimum cancels the pending dispatch."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend()
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=50))
    coordinator.on_input("abc")
    assert coordinator.is_debouncing
    coordinator.on_input("a")
    QTest.qWait(150)
    assert backend.calls == []


# ---------- Debounce ----------

def test_typing_burst_sends_one_lookup(scripted_backend, make_coordinator, wait_until, items):
    """Test "se", "sea", "search" within the delay produce a single lookup."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import Debouncing, Settled
    from pyqt_livequery.protocols import search_config

    backend = scripted_backend(auto_release=True).respond("search", items("Search optimization"))
    coordinator = make_coordinator(backend, search_config())

    coordinator.on_input("se")
    QTest.qWait(100)
    coordinator.on_input("sea")
    QTest.qWait(110)
    coordinator.on_input("search")
    assert coordinator.state == Debouncing("search")
    QTest.qWait(150)
    assert backend.calls == []

    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert backend.calls == ["search"]
    assert coordinator.state.query.text == "search"
    assert coordinator.generation == 1


def test_rapid_edits_collapse(scripted_backend, make_coordinator, wait_until):
    """Test a burst of edits dispatches only the final text."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import Settled
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend(auto_release=True)
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=50))

    for text in ["ca", "cat", "cata", "catal", "catalog"]:
        coordinator.on_input(text)
    wait_until(lambda: isinstance(coordinator.state, Settled))
    QTest.qWait(100)

    assert backend.calls == ["catalog"]


def test_flush_dispatches_pending_input(scripted_backend, make_coordinator, wait_until):
    """Test flush() dispatches a pending debounce immediately."""
    from pyqt_livequery.core import Loading
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend(auto_release=True)
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=10_000))

    assert coordinator.flush() is False
    coordinator.on_input("abc")
    assert coordinator.flush() is True
    assert isinstance(coordinator.state, Loading)
    wait_until(lambda: backend.calls == ["abc"])


# ---------- Staleness ----------

def test_late_response_for_replaced_query_is_discarded(scripted_backend, make_coordinator,
                                                       wait_until, items):
    """Test a slow answer for "cat" never overwrites the answer for "catalog"."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import Settled

    backend = scripted_backend(honor_cancel=False)
    backend.respond("cat", items("Cat pictures")).respond("catalog", items("Catalog design"))
    coordinator = make_coordinator(backend, fast_config())
    states = record_states(coordinator)

    dispatch(coordinator, backend, "cat", wait_until)
    dispatch(coordinator, backend, "catalog", wait_until)

    backend.release("catalog")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    settled = coordinator.state
    assert settled.query.text == "catalog"
    assert [item.label for item in settled.items] == ["Catalog design"]

    emitted = len(states)
    backend.release("cat")
    QTest.qWait(100)
    assert coordinator.state is settled
    assert len(states) == emitted


@pytest.mark.parametrize("order", list(itertools.permutations(["q1", "q2", "q3"])))
def test_only_latest_dispatch_settles(order, scripted_backend, make_coordinator, wait_until, items):
    """Test whatever order responses arrive in, only the last dispatch settles."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import Settled

    backend = scripted_backend(honor_cancel=False)
    for text in ["q1", "q2", "q3"]:
        backend.respond(text, items(f"result {text}"))
    coordinator = make_coordinator(backend, fast_config())
    states = record_states(coordinator)

    for text in ["q1", "q2", "q3"]:
        dispatch(coordinator, backend, text, wait_until)
    for text in order:
        backend.release(text)
    wait_until(lambda: isinstance(coordinator.state, Settled))
    QTest.qWait(100)

    settled = [s for s in states if isinstance(s, Settled)]
    assert len(settled) == 1
    assert settled[0].query.text == "q3"
    assert settled[0].result_set.received_at_generation == coordinator.generation == 3


def test_superseded_lookups_are_cancelled(scripted_backend, make_coordinator, wait_until):
    """Test a new dispatch cancels the previous token."""
    backend = scripted_backend()
    coordinator = make_coordinator(backend, fast_config())

    dispatch(coordinator, backend, "first", wait_until)
    first_token = coordinator._token
    dispatch(coordinator, backend, "second", wait_until)

    assert first_token.is_cancelled
    assert not coordinator._token.is_cancelled


def test_response_while_debouncing_new_input_is_discarded(scripted_backend, make_coordinator,
                                                         wait_until, items):
    """Test an answer arriving while newer input debounces is dropped."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import Debouncing
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend(honor_cancel=False).respond("old", items("Old"))
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=10_000))
    coordinator.on_input("old")
    coordinator.flush()
    wait_until(lambda: backend.calls == ["old"])

    coordinator.on_input("newer")
    backend.release("old")
    QTest.qWait(100)

    assert coordinator.state == Debouncing("newer")


def test_generation_counts_dispatches_only(scripted_backend, make_coordinator, wait_until):
    """Test the generation advances once per dispatch and never on clear or short input."""
    from pyqt_livequery.core import Settled

    backend = scripted_backend(auto_release=True)
    coordinator = make_coordinator(backend, fast_config())

    for text in ["ab", "abc", "abcd"]:
        coordinator.on_input(text)
        wait_until(lambda: isinstance(coordinator.state, Settled)
                   and coordinator.state.query.text == text)
    coordinator.on_input("a")
    coordinator.clear()

    assert coordinator.generation == 3


# ---------- Clear and dispose ----------

def test_clear_while_loading(scripted_backend, make_coordinator, wait_until, items):
    """Test clear() returns to Idle synchronously and the in-flight answer is dropped."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import IDLE

    backend = scripted_backend(honor_cancel=False).respond("dog", items("Dog walking"))
    coordinator = make_coordinator(backend, fast_config())
    states = record_states(coordinator)

    dispatch(coordinator, backend, "dog", wait_until)
    token = coordinator._token
    coordinator.clear()
    assert coordinator.state is IDLE
    assert token.is_cancelled

    emitted = len(states)
    backend.release("dog")
    QTest.qWait(100)
    assert coordinator.state is IDLE
    assert len(states) == emitted


def test_clear_is_idempotent(scripted_backend, make_coordinator):
    """Test repeated clear() emits at most one transition."""
    from pyqt_livequery.core import IDLE, Debouncing

    coordinator = make_coordinator(scripted_backend(), fast_config())
    states = record_states(coordinator)

    coordinator.clear()
    coordinator.clear()
    assert states == []

    coordinator.on_input("ab")
    coordinator.clear()
    coordinator.clear()
    assert states == [Debouncing("ab"), IDLE]


def test_dispose_is_idempotent_and_silences_coordinator(scripted_backend, make_coordinator,
                                                        wait_until, items):
    """Test a disposed coordinator ignores input and late answers."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.core import IDLE

    backend = scripted_backend(honor_cancel=False).respond("late", items("Late"))
    coordinator = make_coordinator(backend, fast_config())
    dispatch(coordinator, backend, "late", wait_until)

    coordinator.dispose()
    coordinator.dispose()
    assert coordinator.is_disposed
    assert coordinator.state is IDLE
    assert coordinator.request_starters() is False

    states = record_states(coordinator)
    backend.release("late")
    coordinator.on_input("more text")
    coordinator.clear()
    QTest.qWait(100)

    assert states == []
    assert coordinator.state is IDLE
    assert backend.calls == ["late"]


# ---------- Failures ----------

def test_upstream_error_becomes_failed(scripted_backend, make_coordinator, wait_until):
    """Test an UpstreamError settles as Failed(UPSTREAM) and new input recovers."""
    from pyqt_livequery.core import Debouncing, ErrorKind, Failed, UpstreamError
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend(auto_release=True)
    backend.respond("zzz", error=UpstreamError("HTTP 500", status_code=500))
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=10_000))

    coordinator.on_input("zzz")
    coordinator.flush()
    wait_until(lambda: isinstance(coordinator.state, Failed))
    assert coordinator.state.kind is ErrorKind.UPSTREAM
    assert coordinator.state.query.text == "zzz"

    coordinator.on_input("zzzq")
    assert coordinator.state == Debouncing("zzzq")


def test_timeout_becomes_failed_timeout(scripted_backend, make_coordinator, wait_until):
    """Test a LookupTimeoutError settles as Failed(TIMEOUT)."""
    from pyqt_livequery.core import ErrorKind, Failed, LookupTimeoutError

    backend = scripted_backend(auto_release=True).respond("slow", error=LookupTimeoutError("late"))
    coordinator = make_coordinator(backend, fast_config())
    coordinator.on_input("slow")
    wait_until(lambda: isinstance(coordinator.state, Failed))
    assert coordinator.state.kind is ErrorKind.TIMEOUT


def test_unexpected_exception_is_upstream(scripted_backend, make_coordinator, wait_until):
    """Test an unexpected exception is reported as an upstream failure."""
    from pyqt_livequery.core import ErrorKind, Failed

    backend = scripted_backend(auto_release=True).respond("boom", error=RuntimeError("bug"))
    coordinator = make_coordinator(backend, fast_config())
    coordinator.on_input("boom")
    wait_until(lambda: isinstance(coordinator.state, Failed))
    assert coordinator.state.kind is ErrorKind.UPSTREAM
    assert coordinator.state.message == "bug"


def test_retry_after_failure(scripted_backend, make_coordinator, wait_until, items):
    """Test retry() re-runs the failed query as a new dispatch."""
    from pyqt_livequery.core import Failed, Settled, UpstreamError

    backend = scripted_backend(auto_release=True)
    backend.respond("flaky", error=UpstreamError("HTTP 502", status_code=502))
    coordinator = make_coordinator(backend, fast_config())

    assert coordinator.retry() is False
    coordinator.on_input("flaky")
    wait_until(lambda: isinstance(coordinator.state, Failed))

    backend.respond("flaky", items("Recovered"))
    assert coordinator.retry() is True
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert backend.calls == ["flaky", "flaky"]
    assert coordinator.generation == 2


# ---------- Results and selection ----------

def test_results_truncated_to_max_results(scripted_backend, make_coordinator, wait_until, items):
    """Test results are cut to max_results."""
    from pyqt_livequery.core import Settled
    from pyqt_livequery.protocols import QueryConfig

    labels = [f"item {i}" for i in range(10)]
    backend = scripted_backend(auto_release=True).respond("many", items(*labels))
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=0, max_results=3))

    coordinator.on_input("many")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert [item.label for item in coordinator.state.items] == labels[:3]


def test_empty_results_settle(scripted_backend, make_coordinator, wait_until):
    """Test an empty answer still settles."""
    from pyqt_livequery.core import Settled

    coordinator = make_coordinator(scripted_backend(auto_release=True), fast_config())
    coordinator.on_input("nothing")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert coordinator.state.result_set.is_empty


def test_selection_resets_on_every_new_result_set(scripted_backend, make_coordinator,
                                                  wait_until, items):
    """Test the cursor returns to its default on each new result set and on clear."""
    from pyqt_livequery.core import Settled
    from pyqt_livequery.protocols import autosuggest_config

    backend = scripted_backend(auto_release=True).respond("tell", items("a", "b", "c"))
    backend.respond("tell ", items("a", "b", "c"))
    coordinator = make_coordinator(backend, autosuggest_config(debounce_delay_ms=0))

    coordinator.on_input("tell")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert coordinator.cursor.index == 0
    coordinator.cursor.move_next()
    coordinator.cursor.move_next()
    assert coordinator.selected_item.label == "c"

    first = coordinator.state
    coordinator.on_input("tell ")
    wait_until(lambda: isinstance(coordinator.state, Settled) and coordinator.state is not first)
    assert coordinator.cursor.index == 0

    coordinator.clear()
    assert coordinator.cursor.index == -1
    assert coordinator.selected_item is None


def test_search_selection_starts_unselected(scripted_backend, make_coordinator, wait_until, items):
    """Test search results start unselected and cursor moves emit snapshots."""
    from pyqt_livequery.core import Settled
    from pyqt_livequery.protocols import search_config

    backend = scripted_backend(auto_release=True).respond("chat", items("a", "b"))
    coordinator = make_coordinator(backend, search_config(debounce_delay_ms=0))
    snapshots = []
    coordinator.snapshot_changed.connect(snapshots.append)

    coordinator.on_input("chat")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert coordinator.cursor.index == -1

    coordinator.cursor.move_next()
    assert snapshots[-1].selected_index == 0
    assert snapshots[-1].selected_item.label == "a"
    assert snapshots[-1].state is coordinator.state


# ---------- Starter suggestions ----------

def test_request_starters_fills_snapshot_while_idle(scripted_backend, make_coordinator,
                                                    wait_until, items):
    """Test starters arrive in the snapshot without a state transition."""
    from pyqt_livequery.core import IDLE

    backend = scripted_backend(auto_release=True).respond("", items("explain", "compare", "summarize"))
    coordinator = make_coordinator(backend, fast_config(max_results=2, auto_select_first=True))
    states = record_states(coordinator)
    snapshots = []
    coordinator.snapshot_changed.connect(snapshots.append)

    assert coordinator.request_starters() is True
    wait_until(lambda: coordinator.starters)

    assert [item.label for item in coordinator.starters] == ["explain", "compare"]
    assert snapshots[-1].state is IDLE
    assert [item.label for item in snapshots[-1].items] == ["explain", "compare"]
    assert snapshots[-1].selected_item.label == "explain"
    assert states == []
    assert coordinator.generation == 0


def test_request_starters_only_while_idle(scripted_backend, make_coordinator):
    """Test request_starters is refused outside Idle."""
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend()
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=10_000))
    coordinator.on_input("abc")
    assert coordinator.request_starters() is False
    assert backend.calls == []


def test_typing_drops_starters(scripted_backend, make_coordinator, wait_until, items):
    """Test leaving Idle removes the starters from the snapshot."""
    from pyqt_livequery.core import Debouncing
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend(auto_release=True).respond("", items("explain"))
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=10_000))
    snapshots = []
    coordinator.snapshot_changed.connect(snapshots.append)
    coordinator.request_starters()
    wait_until(lambda: coordinator.starters)

    coordinator.on_input("ab")
    assert coordinator.starters == ()
    assert snapshots[-1].state == Debouncing("ab")
    assert snapshots[-1].items == ()
    assert coordinator.cursor.count == 0


def test_late_starters_after_typing_are_ignored(scripted_backend, make_coordinator,
                                                wait_until, items):
    """Test starters answering after the user started typing are discarded."""
    from PyQt6.QtTest import QTest
    from pyqt_livequery.protocols import QueryConfig

    backend = scripted_backend(honor_cancel=False).respond("", items("explain"))
    coordinator = make_coordinator(backend, QueryConfig(debounce_delay_ms=10_000))
    coordinator.request_starters()
    wait_until(lambda: backend.calls == [""])

    coordinator.on_input("ab")
    coordinator.on_input("")
    backend.release("")
    QTest.qWait(100)

    assert coordinator.starters == ()


def test_clear_drops_starters(scripted_backend, make_coordinator, wait_until, items):
    """Test clear() removes shown starters and discards pending ones."""
    from PyQt6.QtTest import QTest

    backend = scripted_backend(auto_release=True).respond("", items("explain"))
    coordinator = make_coordinator(backend, fast_config())
    snapshots = []
    coordinator.snapshot_changed.connect(snapshots.append)

    coordinator.request_starters()
    wait_until(lambda: coordinator.starters)
    coordinator.clear()
    assert coordinator.starters == ()
    assert snapshots[-1].items == ()

    slow = scripted_backend(honor_cancel=False).respond("", items("explain"))
    pending = make_coordinator(slow, fast_config())
    pending.request_starters()
    wait_until(lambda: slow.calls == [""])
    pending.clear()
    slow.release("")
    QTest.qWait(100)
    assert pending.starters == ()


def test_erasing_input_refetches_starters(scripted_backend, make_coordinator, wait_until, items):
    """Test empty input fetches starters only when show_starters is set."""
    from PyQt6.QtTest import QTest

    backend = scripted_backend(auto_release=True).respond("", items("explain"))
    coordinator = make_coordinator(backend, fast_config(show_starters=True))
    coordinator.on_input("ab")
    coordinator.on_input("")
    wait_until(lambda: coordinator.starters)
    assert backend.calls.count("") == 1

    plain = scripted_backend(auto_release=True).respond("", items("explain"))
    quiet = make_coordinator(plain, fast_config())
    quiet.on_input("ab")
    quiet.on_input("")
    QTest.qWait(50)
    assert "" not in plain.calls
    assert quiet.starters == ()


def test_starter_failure_is_logged_and_leaves_box_empty(scripted_backend, make_coordinator,
                                                        wait_until, caplog):
    """Test a failing starter request logs a warning and shows nothing."""
    import logging
    from pyqt_livequery.core import IDLE, UpstreamError

    caplog.set_level(logging.WARNING, logger="pyqt_livequery.services.query_coordinator")
    backend = scripted_backend(auto_release=True).respond("", error=UpstreamError("HTTP 500"))
    coordinator = make_coordinator(backend, fast_config())

    coordinator.request_starters()
    wait_until(lambda: any("Starter request" in r.getMessage() for r in caplog.records))
    assert coordinator.starters == ()
    assert coordinator.state is IDLE


# ---------- Backend swapping ----------

def test_swap_backend_affects_only_future_dispatches(scripted_backend, make_coordinator,
                                                     wait_until, items):
    """Test swapping backends mid-flight keeps the in-flight answer and reroutes new ones."""
    from pyqt_livequery.core import Settled
    from pyqt_livequery.services import BackendSelector

    first = scripted_backend(name="first").respond("abc", items("from first"))
    second = scripted_backend(name="second", auto_release=True).respond("abcd", items("from second"))
    selector = BackendSelector(first)
    coordinator = make_coordinator(first, fast_config(), selector=selector)

    dispatch(coordinator, first, "abc", wait_until)
    selector.set_current(second)
    first.release("abc")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert coordinator.state.items[0].label == "from first"

    coordinator.on_input("abcd")
    wait_until(lambda: isinstance(coordinator.state, Settled)
               and coordinator.state.query.text == "abcd")
    assert second.calls == ["abcd"]
    assert first.calls == ["abc"]


def test_completion_log_names_backend_that_answered(scripted_backend, make_coordinator,
                                                    wait_until, items, caplog):
    """Test the completion log names the dispatching backend, not the current one."""
    import logging
    from pyqt_livequery.core import Settled
    from pyqt_livequery.services import BackendSelector

    caplog.set_level(logging.INFO, logger="pyqt_livequery.services.query_coordinator")
    first = scripted_backend(name="first").respond("abc", items("from first"))
    second = scripted_backend(name="second")
    selector = BackendSelector(first)
    coordinator = make_coordinator(first, fast_config(), selector=selector)

    dispatch(coordinator, first, "abc", wait_until)
    selector.set_current(second)
    first.release("abc")
    wait_until(lambda: isinstance(coordinator.state, Settled))

    completed = [r.getMessage() for r in caplog.records if "completed for" in r.getMessage()]
    assert len(completed) == 1
    assert "using first" in completed[0]
    assert "second" not in completed[0]


def test_coordinators_share_a_selector(scripted_backend, make_coordinator):
    """Test two coordinators can share one selector with separate cursors."""
    from pyqt_livequery.protocols import autosuggest_config, search_config
    from pyqt_livequery.services import BackendSelector

    backend = scripted_backend()
    selector = BackendSelector(backend)
    search = make_coordinator(backend, search_config(), selector=selector, name="search")
    suggest = make_coordinator(backend, autosuggest_config(), selector=selector, name="suggest")
    assert search.cursor is not suggest.cursor
    assert search.name == "search"


# ---------- End to end ----------

def test_remote_backend_through_coordinator(make_coordinator, wait_until):
    """Test a coordinator settles with results from an HTTP backend."""
    import httpx
    from pyqt_livequery.core import Settled
    from pyqt_livequery.protocols import search_endpoint
    from pyqt_livequery.services import RemoteBackend

    def handler(request):
        query = request.url.params["q"]
        return httpx.Response(200, json={"items": [{"id": "1", "title": f"About {query}"}]})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    backend = RemoteBackend(search_endpoint("http://test/api"), client=client)
    coordinator = make_coordinator(backend, fast_config())

    coordinator.on_input("react")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert coordinator.state.items[0].label == "About react"


def test_performance_monitoring_records_latency(make_coordinator, wait_until):
    """Test each settled dispatch records one latency sample."""
    from pyqt_livequery.core import Settled, get_monitor
    from pyqt_livequery.protocols import QueryConfig
    from pyqt_livequery.services import create_search_backend

    monitor = get_monitor("perf-test lookup")
    monitor.reset()
    backend = create_search_backend(latency_ms=0, jitter_ms=0)
    config = QueryConfig(debounce_delay_ms=0, enable_performance_monitoring=True, enable_logging=False)
    coordinator = make_coordinator(backend, config, name="perf-test")

    coordinator.on_input("search")
    wait_until(lambda: isinstance(coordinator.state, Settled))
    assert monitor.stats().count == 1
    assert len(coordinator.state.items) == 8
