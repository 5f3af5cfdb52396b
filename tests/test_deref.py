import httpx

from heldcli.core import init_core
from heldcli.model.schema import FOUND, LocationReference, LookupOutcome
from heldcli.modules.deref import Dereferencer
from heldcli.render import BANNER

PIDF = '<presence xmlns="urn:ietf:params:xml:ns:pidf" entity="pres:abc@example.com"/>'


def _deref(handler, **kwargs):
    lines = []
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return Dereferencer(http=http, write=lines.append, **kwargs), lines


def test_dereference_prints_status_and_body_verbatim():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=PIDF)

    d, lines = _deref(handler, headers={"X-Tenant": "acme"})
    d.dereference("https://example.org/loc/42")

    assert [str(r.url) for r in seen] == ["https://example.org/loc/42"]
    assert seen[0].method == "GET"
    assert seen[0].headers["accept"] == "application/pidf+xml"
    assert seen[0].headers["x-tenant"] == "acme"
    assert "Status: 200" in lines
    assert PIDF in lines
    assert lines[0] == lines[-1]


def test_non_success_status_is_still_printed():
    d, lines = _deref(lambda request: httpx.Response(410, text="gone"))
    d.dereference("https://example.org/loc/expired")
    assert "Status: 410" in lines
    assert "gone" in lines


def test_transport_failure_is_reported_not_raised():
    def handler(request):
        raise httpx.ConnectError("no route to host", request=request)

    d, lines = _deref(handler)
    d.dereference("https://unreachable.example/loc")
    assert len(lines) == 1
    assert lines[0].startswith("Dereference failed for https://unreachable.example/loc")


def test_unsupported_scheme_is_reported_not_raised():
    lines = []
    d = Dereferencer(write=lines.append)
    d.dereference("ftp://example.org/loc")
    assert lines and lines[0].startswith("Dereference failed")
    d.close()


def test_unexpected_exception_is_reported_not_raised():
    def handler(request):
        raise ValueError("bad certificate bundle")

    d, lines = _deref(handler)
    result = d.fetch("https://example.org/loc/1")
    assert result.error == "ValueError: bad certificate bundle"

    d.report(result)
    assert lines == ["Dereference failed for https://example.org/loc/1: ValueError: bad certificate bundle"]


def test_verbose_result_still_renders_when_dereference_blows_up(lookup, capsys):
    def handler(request):
        raise RuntimeError("resolver crashed")

    d = Dereferencer(http=httpx.Client(transport=httpx.MockTransport(handler)))
    core = init_core(client=lookup, deref=d)
    core.execute("verbose on")
    core.execute("held abc")
    request, cb = lookup.submitted[-1]
    capsys.readouterr()

    cb.on_completed(request, LookupOutcome(status=FOUND, references=[LocationReference("https://lis.example/r")]))
    out = capsys.readouterr().out

    assert "Dereference failed for https://lis.example/r: RuntimeError: resolver crashed" in out
    assert "Location references:" in out
    assert out.endswith(BANNER + "\n> ")
    assert core.tracker.pending() == 0
    core.shutdown()
