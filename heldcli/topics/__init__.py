from heldcli.topics import deref, lookup, settings

ALL_COMMANDS = {}
for _topic in (lookup, settings, deref):
    ALL_COMMANDS.update(_topic.COMMANDS)
