# heldcli/aliases.py
#
# Operator never invokes sys.* directly.
# Alias expansion is token0 replacement to internal sys.* primitives.
# Order here is the order shown by help.

ALIASES = {
    # lookups
    "held":    "sys.held.find",
    "last":    "sys.last",
    "deref":   "sys.deref",

    # session settings
    "verbose": "sys.set.verbose",
    "exact":   "sys.set.exact",
    "types":   "sys.set.types",

    "quit":    "sys.quit",
    "exit":    "sys.quit",
}


class AliasManager:
    def __init__(self, aliases):
        self.aliases = dict(aliases)

    def has_alias(self, name: str) -> bool:
        return name in self.aliases

    def expand(self, parts):
        if not parts:
            return parts
        head = parts[0]
        exp = self.aliases.get(head)
        if not exp:
            return parts
        return exp.strip().split() + parts[1:]

    def list_aliases(self):
        return list(self.aliases.keys())

    def get_alias(self, name):
        return self.aliases.get(name)
