# heldcli/topics/deref.py
#
# deref [uri]   explicit uri, else the last location reference seen.
# Synchronous: the REPL waits for the fetch.

def deref(core, uri=None, *_ignored):
    """sys.deref [uri]"""
    target = uri or core.state.last_reference
    if not target:
        return "No location reference to dereference"
    core.deref.dereference(target)
    return None


COMMANDS = {
    "sys.deref": (deref, "Dereference a location URI (default: last reference)", "deref [uri]"),
}
