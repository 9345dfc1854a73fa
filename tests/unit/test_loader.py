"""
Unit tests -- HistoryLoader lifecycle: refresh, generations, mount guard.
"""
import datetime

from reportes.history.client import HistoryFetchError
from reportes.history.loader import HistoryLoader
from reportes.history.models import HistoryRecord
from reportes.history.state import LOAD_ERROR_MESSAGE

_TS = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


def _records(*ids):
    return [HistoryRecord(id=i, username="ana", creado_en=_TS) for i in ids]


class _ScriptedFetch:
    """Returns queued results in order; exceptions are raised."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def test_refresh_success():
    loader = HistoryLoader(fetch=_ScriptedFetch(_records(1, 2)))
    state = loader.refresh()
    assert state.loading is False
    assert [r.id for r in state.items] == [1, 2]
    assert state.error == ""


def test_refresh_empty_result_is_not_an_error():
    loader = HistoryLoader(fetch=_ScriptedFetch([]))
    state = loader.refresh()
    assert state.error == ""
    assert state.items == ()


def test_refresh_failure_keeps_previous_items():
    loader = HistoryLoader(fetch=_ScriptedFetch(_records(1), HistoryFetchError("HTTP 500")))
    loader.refresh()
    state = loader.refresh()
    assert state.error == LOAD_ERROR_MESSAGE
    assert [r.id for r in state.items] == [1]


def test_first_failure_has_no_items():
    loader = HistoryLoader(fetch=_ScriptedFetch(HistoryFetchError("HTTP 401")))
    state = loader.refresh()
    assert state.error == LOAD_ERROR_MESSAGE
    assert state.items == ()


def test_generations_increase():
    loader = HistoryLoader(fetch=_ScriptedFetch([], []))
    loader.refresh()
    first = loader.state.generation
    loader.refresh()
    assert loader.state.generation == first + 1


def test_overlapping_fetch_last_started_wins():
    loader = HistoryLoader(fetch=_ScriptedFetch())
    g1 = loader.begin()
    g2 = loader.begin()
    loader.complete(g2, _records(2))
    loader.complete(g1, _records(1))  # late arrival
    assert [r.id for r in loader.state.items] == [2]


def test_closed_loader_ignores_late_result():
    loader = HistoryLoader(fetch=_ScriptedFetch())
    gen = loader.begin()
    loader.close()
    state = loader.complete(gen, _records(1))
    assert state.items == ()
    assert state.loading is True
    assert loader.closed


def test_ensure_loaded_fetches_once():
    fetch = _ScriptedFetch(_records(1))
    loader = HistoryLoader(fetch=fetch)
    loader.ensure_loaded()
    loader.ensure_loaded()
    assert fetch.calls == 1
    assert loader.loaded_once


def test_export_busy_flag():
    loader = HistoryLoader(fetch=_ScriptedFetch(_records(1)))
    loader.refresh()
    assert loader.start_export() is True
    assert loader.start_export() is False  # no overlapping exports
    loader.finish_export()
    assert loader.state.exporting is False


def test_export_refused_without_items():
    loader = HistoryLoader(fetch=_ScriptedFetch([]))
    loader.refresh()
    assert loader.start_export() is False


def test_export_refused_while_loading():
    loader = HistoryLoader(fetch=_ScriptedFetch())
    loader.begin()
    assert loader.start_export() is False


def test_unexpected_fetch_error_clears_loading():
    loader = HistoryLoader(fetch=_ScriptedFetch(TypeError("'int' object is not iterable")))
    state = loader.refresh()
    assert state.loading is False
    assert state.error == LOAD_ERROR_MESSAGE


def test_non_list_items_end_in_error_state():
    import httpx

    from reportes.history.client import fetch_history

    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"items": 5})))
    loader = HistoryLoader(fetch=lambda: fetch_history(client=client, token="t"))
    state = loader.refresh()
    assert state.loading is False
    assert state.error == LOAD_ERROR_MESSAGE
    assert state.can_export is False
