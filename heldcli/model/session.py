# heldcli/model/session.py
#
# Mutable session settings read and written by the REPL commands.
# last_reference is also written by the result renderer (under core.exec_lock).

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from heldcli.model.schema import LocationType

DEFAULT_LAST_COMMAND = "help"


@dataclass
class SessionState:
    verbose: bool = False
    exact: bool = False
    # ordered, no duplicates; empty means "server default"
    location_types: List[LocationType] = field(default_factory=list)
    last_command: str = DEFAULT_LAST_COMMAND
    last_reference: Optional[str] = None

    def set_location_types(self, types) -> None:
        self.location_types = []
        for t in types:
            if t not in self.location_types:
                self.location_types.append(t)
