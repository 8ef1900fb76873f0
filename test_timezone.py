"""
Tests for the three step timezone lookup, persistence and retry behaviour.
"""

import os
import time

import pytest

import config
import timezone
from conftest import BERLIN_POSIX, ZONES_CSV, FakeHttp, FakeStore, lookup_responses
from state import TimezoneState, TimezoneStatus
from timezone import TimezoneResolver

TZ_KEY = config.Storage.TIMEZONE_KEY


def make_resolver(http, store=None, apply_recorder=None):
    store = store if store is not None else FakeStore()
    apply = apply_recorder if apply_recorder is not None else (lambda posix: None)
    return TimezoneResolver(http, store, TimezoneState(), apply_timezone=apply)

# ============================================================================
# PARSING
# ============================================================================

def test_timezone_name_from_json():
    body = '{"timeZone":"Europe/Berlin","currentLocalTime":"2025-09-17T12:00:00"}'
    assert timezone.find_timezone_name(body) == "Europe/Berlin"


def test_timezone_name_with_spaces_in_json():
    assert timezone.find_timezone_name('{ "timeZone" : "Asia/Tokyo" }') == "Asia/Tokyo"


def test_timezone_name_falls_back_to_literal_scan():
    # Truncated body, not valid JSON
    body = '{"ipAddress":"203.0.113.7","timeZone":"America/Chicago","dst'
    assert timezone.find_timezone_name(body) == "America/Chicago"


@pytest.mark.parametrize("body", [
    "",
    None,
    '{"ipAddress":"203.0.113.7"}',
    '{"timeZone":""}',
    '{"timeZone":null}',
    "Too many requests",
])
def test_timezone_name_missing(body):
    assert timezone.find_timezone_name(body) is None


def test_extract_quoted_after():
    assert timezone.extract_quoted_after('a "k":"value" b', '"k":"') == "value"
    assert timezone.extract_quoted_after('"k":"unterminated', '"k":"') is None
    assert timezone.extract_quoted_after("nothing here", '"k":"') is None


def test_posix_definition_found():
    assert timezone.find_posix_definition(ZONES_CSV, "Europe/Berlin") == BERLIN_POSIX


def test_posix_definition_with_commas_inside_quotes():
    assert timezone.find_posix_definition(ZONES_CSV, "America/Chicago") == "CST6CDT,M3.2.0,M11.1.0"


def test_posix_definition_defaults_to_utc():
    assert timezone.find_posix_definition(ZONES_CSV, "Mars/Olympus_Mons") == "UTC0"


def test_posix_definition_skips_empty_values():
    body = '"Europe/Berlin",""\n"Europe/Berlin","CET-1"\n'
    assert timezone.find_posix_definition(body, "Europe/Berlin") == "CET-1"

# ============================================================================
# LOOKUP CHAIN
# ============================================================================

def test_successful_lookup_applies_and_persists(apply_recorder):
    http = FakeHttp(lookup_responses())
    store = FakeStore()
    resolver = make_resolver(http, store, apply_recorder)

    assert resolver.attempt_resolve() is True

    assert resolver.resolved
    assert resolver.state.status == TimezoneStatus.RESOLVED
    assert resolver.state.iana_name == "Europe/Berlin"
    assert resolver.state.posix_definition == BERLIN_POSIX
    assert resolver.state.label == "Europe/Berlin"
    assert apply_recorder.applied == [BERLIN_POSIX]
    assert store.puts == [(TZ_KEY, BERLIN_POSIX)]
    assert http.calls == [
        config.API.EXTERNAL_IP_URL,
        config.API.TIMEZONE_BY_IP_URL.format(address="203.0.113.7"),
        config.API.POSIX_ZONES_CSV_URL,
    ]


def test_address_whitespace_is_stripped():
    responses = lookup_responses()
    responses[config.API.EXTERNAL_IP_URL] = (200, "203.0.113.7\n")
    resolver = make_resolver(FakeHttp(responses))

    assert resolver.attempt_resolve() is True


def test_external_ip_failure_stops_the_chain(apply_recorder):
    responses = lookup_responses()
    responses[config.API.EXTERNAL_IP_URL] = (503, "")
    http = FakeHttp(responses)
    store = FakeStore()
    resolver = make_resolver(http, store, apply_recorder)

    assert resolver.attempt_resolve() is False

    assert http.calls == [config.API.EXTERNAL_IP_URL]
    assert resolver.state.status == TimezoneStatus.UNRESOLVED
    assert resolver.state.posix_definition == "UTC0"
    assert store.puts == []
    assert apply_recorder.applied == []


def test_missing_timezone_field_skips_csv():
    http = FakeHttp(lookup_responses(zone_body='{"error":"rate limited"}'))
    resolver = make_resolver(http)

    assert resolver.attempt_resolve() is False
    assert config.API.POSIX_ZONES_CSV_URL not in http.calls
    assert not resolver.resolved


def test_csv_download_failure():
    responses = lookup_responses()
    responses[config.API.POSIX_ZONES_CSV_URL] = (500, "oops")
    store = FakeStore()
    resolver = make_resolver(FakeHttp(responses), store)

    assert resolver.attempt_resolve() is False
    assert store.puts == []
    assert resolver.state.iana_name == ""


def test_empty_csv_body_is_a_failure():
    resolver = make_resolver(FakeHttp(lookup_responses(csv_body="")))
    assert resolver.attempt_resolve() is False


def test_zone_missing_from_csv_resolves_to_utc(apply_recorder):
    store = FakeStore()
    http = FakeHttp(lookup_responses(zone_body='{"timeZone":"Mars/Olympus_Mons"}'))
    resolver = make_resolver(http, store, apply_recorder)

    assert resolver.attempt_resolve() is True
    assert resolver.state.posix_definition == "UTC0"
    assert resolver.state.iana_name == "Mars/Olympus_Mons"
    assert store.puts == [(TZ_KEY, "UTC0")]
    assert apply_recorder.applied == ["UTC0"]


@pytest.mark.parametrize("error", [OSError("unreachable"), TimeoutError("slow"), RuntimeError("ssl")])
def test_transport_errors_never_escape(error):
    resolver = make_resolver(FakeHttp(error=error))

    assert resolver.attempt_resolve() is False
    assert resolver.state.status == TimezoneStatus.UNRESOLVED
    assert resolver.failures == 1


def test_failure_keeps_previous_state():
    resolver = make_resolver(FakeHttp())
    resolver.attempt_resolve()
    resolver.attempt_resolve()

    assert resolver.attempts == 2
    assert resolver.failures == 2
    assert resolver.state.posix_definition == "UTC0"


def test_retry_after_failure_succeeds():
    http = FakeHttp()
    resolver = make_resolver(http)
    assert resolver.attempt_resolve() is False

    http.responses = lookup_responses()
    assert resolver.attempt_resolve() is True
    assert resolver.state.posix_definition == BERLIN_POSIX


def test_already_resolved_makes_no_requests():
    http = FakeHttp(lookup_responses())
    resolver = make_resolver(http)
    resolver.attempt_resolve()
    calls = len(http.calls)

    assert resolver.attempt_resolve() is True
    assert len(http.calls) == calls
    assert resolver.attempts == 1


def test_persist_failure_still_resolves(apply_recorder):
    store = FakeStore(fail_put=True)
    resolver = make_resolver(FakeHttp(lookup_responses()), store, apply_recorder)

    assert resolver.attempt_resolve() is True
    assert resolver.resolved
    assert apply_recorder.applied == [BERLIN_POSIX]
    assert store.values == {}


def test_apply_failure_is_logged_not_raised():
    def broken_apply(posix):
        raise OSError("tzset unavailable")

    resolver = TimezoneResolver(FakeHttp(lookup_responses()), FakeStore(), TimezoneState(),
                                apply_timezone=broken_apply)
    assert resolver.attempt_resolve() is True

# ============================================================================
# PERSISTENCE
# ============================================================================

def test_stored_definition_is_used_without_network(apply_recorder):
    http = FakeHttp(lookup_responses())
    store = FakeStore({TZ_KEY: BERLIN_POSIX})
    resolver = make_resolver(http, store, apply_recorder)

    assert resolver.load_persisted() == BERLIN_POSIX
    assert resolver.resolved
    assert resolver.state.label == BERLIN_POSIX
    assert apply_recorder.applied == [BERLIN_POSIX]

    # Later attempts are no-ops
    assert resolver.attempt_resolve() is True
    assert http.calls == []


def test_load_persisted_is_repeatable(apply_recorder):
    store = FakeStore({TZ_KEY: BERLIN_POSIX})
    resolver = make_resolver(FakeHttp(), store, apply_recorder)

    first = resolver.load_persisted()
    second = resolver.load_persisted()

    assert first == second == BERLIN_POSIX
    assert resolver.state.posix_definition == BERLIN_POSIX
    assert store.puts == []


@pytest.mark.parametrize("stored", [None, "", 42])
def test_nothing_stored_applies_utc(apply_recorder, stored):
    values = {} if stored is None else {TZ_KEY: stored}
    resolver = make_resolver(FakeHttp(), FakeStore(values), apply_recorder)

    assert resolver.load_persisted() is None
    assert not resolver.resolved
    assert apply_recorder.applied == ["UTC0"]


def test_resolved_definition_survives_restart():
    store = FakeStore()
    make_resolver(FakeHttp(lookup_responses()), store).attempt_resolve()

    http = FakeHttp()
    restarted = make_resolver(http, store)
    assert restarted.load_persisted() == BERLIN_POSIX
    assert http.calls == []

# ============================================================================
# PROCESS TIMEZONE
# ============================================================================

@pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset is POSIX only")
def test_apply_posix_timezone_sets_process_tz(monkeypatch):
    calls = []
    monkeypatch.setenv("TZ", "UTC0")
    monkeypatch.setattr(time, "tzset", lambda: calls.append(os.environ["TZ"]))

    timezone.apply_posix_timezone(BERLIN_POSIX)

    assert os.environ["TZ"] == BERLIN_POSIX
    assert calls == [BERLIN_POSIX]


def test_timezone_name_nested_in_json():
    body = '{"data":{"timeZone":"Europe/Berlin"},"status":"ok"}'
    assert timezone.find_timezone_name(body) == "Europe/Berlin"


def test_nested_timezone_field_resolves():
    http = FakeHttp(lookup_responses(zone_body='{"result":{"timeZone":"Europe/Berlin"}}'))
    resolver = make_resolver(http)

    assert resolver.attempt_resolve() is True
    assert resolver.state.iana_name == "Europe/Berlin"
