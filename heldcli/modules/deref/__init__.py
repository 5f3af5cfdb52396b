from heldcli.modules.deref.client import DerefResult, Dereferencer

__all__ = ["DerefResult", "Dereferencer"]
