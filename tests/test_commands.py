import pytest

from heldcli.model.schema import FOUND, Location, LocationReference, LocationType, LookupOutcome


def test_example_lookup_scenario(core, lookup, capsys):
    assert core.execute("exact true")
    assert core.execute("types geo civ")
    assert core.execute("held abc123")

    assert len(lookup.submitted) == 1
    request, callback = lookup.submitted[0]
    assert request.identifier == "abc123"
    assert request.location_types == (LocationType.GEODETIC, LocationType.CIVIC)
    assert request.exact is True
    assert core.tracker.pending() == 1

    capsys.readouterr()
    callback.on_completed(request, LookupOutcome(status=FOUND, locations=[Location(48.2, 16.3)]))
    out = capsys.readouterr().out

    assert "abc123" in out
    assert "lat: 48.2" in out
    assert "lon: 16.3" in out
    assert "https://www.google.com/maps/?q=48.2,16.3" in out
    assert core.tracker.pending() == 0


def test_held_without_identifier_is_usage_error(core, lookup, capsys):
    assert core.execute("held") is True
    assert "Usage: held <identifier>" in capsys.readouterr().out
    assert lookup.submitted == []
    assert core.tracker.pending() == 0


def test_identical_lookups_are_tracked_independently(core, lookup):
    core.execute("held same")
    core.execute("held same")

    (first, cb), (second, _) = lookup.submitted
    assert first is not second
    assert core.tracker.pending() == 2

    cb.on_completed(first, LookupOutcome(status=FOUND))
    assert first not in core.tracker
    assert second in core.tracker
    assert core.tracker.pending() == 1


def test_last_replays_stored_line_without_overwriting_it(core, lookup):
    core.execute("held abc")
    core.execute("last")
    core.execute("last")

    assert core.state.last_command == "held abc"
    assert [r.identifier for r, _ in lookup.submitted] == ["abc", "abc", "abc"]


def test_last_defaults_to_help(core, capsys):
    core.execute("last")
    out = capsys.readouterr().out
    assert "held <identifier>" in out
    assert core.state.last_command == "help"


def test_every_other_command_updates_last_command(core):
    core.execute("verbose off")
    assert core.state.last_command == "verbose off"
    core.execute("bogus thing")
    assert core.state.last_command == "bogus thing"
    core.execute("   ")
    assert core.state.last_command == "bogus thing"


@pytest.mark.parametrize(
    "line,expected",
    [
        ("verbose", True),
        ("verbose on", True),
        ("verbose TRUE", True),
        ("verbose off", False),
        ("verbose false", False),
        ("verbose maybe", False),
    ],
)
def test_verbose_flag(core, capsys, line, expected):
    core.state.verbose = not expected
    core.execute(line)
    assert core.state.verbose is expected
    assert f"verbose: {expected}" in capsys.readouterr().out


@pytest.mark.parametrize("line,expected", [("exact", True), ("exact true", True), ("exact false", False)])
def test_exact_flag(core, line, expected):
    core.state.exact = not expected
    core.execute(line)
    assert core.state.exact is expected


def test_types_without_tokens_clears(core):
    core.execute("types geo ref")
    assert core.state.location_types == [LocationType.GEODETIC, LocationType.LOCATION_URI]
    core.execute("types")
    assert core.state.location_types == []


def test_types_reports_only_invalid_token_and_applies_the_rest(core, capsys):
    core.execute("types geo bogus ref geo")
    out = capsys.readouterr().out

    assert "Unknown location type: bogus" in out
    assert out.count("Unknown location type") == 1
    assert core.state.location_types == [LocationType.GEODETIC, LocationType.LOCATION_URI]


def test_deref_explicit_uri_without_prior_lookups(core, deref):
    assert core.state.last_reference is None
    core.execute("deref https://example.org/loc/42")
    assert deref.uris == ["https://example.org/loc/42"]


def test_bare_deref_without_reference_is_a_noop(core, deref, capsys):
    core.execute("deref")
    assert deref.uris == []
    assert "No location reference" in capsys.readouterr().out


def test_bare_deref_uses_last_reference_of_found_outcome(core, lookup, deref):
    core.execute("held abc")
    request, callback = lookup.submitted[0]
    callback.on_completed(
        request,
        LookupOutcome(
            status=FOUND,
            references=[
                LocationReference("https://lis.example/ref/1"),
                LocationReference("https://lis.example/ref/2"),
            ],
        ),
    )
    assert core.state.last_reference == "https://lis.example/ref/2"

    core.execute("deref")
    assert deref.uris == ["https://lis.example/ref/2"]


@pytest.mark.parametrize("line", ["quit", "exit"])
def test_quit_ends_session(core, line):
    assert core.execute(line) is False


def test_last_replaying_quit_ends_session(core):
    core.execute("quit")
    core.keep_running = True
    assert core.execute("last") is False


def test_unknown_command_continues(core, capsys):
    assert core.execute("frobnicate now") is True
    assert "Unknown command: frobnicate" in capsys.readouterr().out


def test_command_exception_is_caught_and_session_continues(core, lookup, capsys):
    def boom(request, callback):
        raise RuntimeError("boom")

    lookup.find_location = boom
    assert core.execute("held abc") is True
    assert "Error: boom" in capsys.readouterr().out
    assert core.tracker.pending() == 0
    assert {"out": "Error: boom"} in core.log


def test_help_for_single_command(core, capsys):
    core.execute("help types")
    assert "types [geo] [civ] [ref]" in capsys.readouterr().out
    core.execute("help nope")
    assert "Unknown command: nope" in capsys.readouterr().out


def test_journal_keeps_only_recent_entries(core):
    from heldcli.core import JOURNAL_SIZE

    for i in range(JOURNAL_SIZE):
        core.execute("verbose on" if i % 2 else "verbose off")
    core.execute("exact on")

    assert len(core.log) == JOURNAL_SIZE
    assert list(core.log)[-2:] == [{"in": "exact on"}, {"out": "exact: True"}]
