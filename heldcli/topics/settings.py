# heldcli/topics/settings.py
#
# Session switches.
#
#   verbose [on|off|true|false]   no value -> on
#   exact   [on|off|true|false]   no value -> on
#   types   [geo civ ref ...]     replaces the set; no tokens -> server default
#
# Unknown type tokens are reported one by one and skipped.

from heldcli.model.schema import TYPE_TOKENS

TRUTHY = ("on", "true", "yes", "1")


def parse_flag(value=None) -> bool:
    if value is None:
        return True
    return str(value).strip().lower() in TRUTHY


def set_verbose(core, value=None, *_ignored):
    core.state.verbose = parse_flag(value)
    return f"verbose: {core.state.verbose}"


def set_exact(core, value=None, *_ignored):
    core.state.exact = parse_flag(value)
    return f"exact: {core.state.exact}"


def describe_types(types) -> str:
    if not types:
        return "types: (server default)"
    return "types: " + " ".join(t.value for t in types)


def set_types(core, *tokens):
    selected = []
    for tok in tokens:
        t = TYPE_TOKENS.get(tok.lower())
        if t is None:
            core.emit(f"Unknown location type: {tok} (expected one of: {' '.join(TYPE_TOKENS)})")
            continue
        selected.append(t)

    core.state.set_location_types(selected)
    return describe_types(core.state.location_types)


COMMANDS = {
    "sys.set.verbose": (set_verbose, "Show raw request/response and dereference results", "verbose [on|off]"),
    "sys.set.exact":   (set_exact,   "Request exact location types",                       "exact [true|false]"),
    "sys.set.types":   (set_types,   "Set requested location types",                       "types [geo] [civ] [ref]"),
}
