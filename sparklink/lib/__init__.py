from sparklink.lib.hooks import hooks, action

__all__ = ["hooks", "action"]
