"""
The `integrations` module wraps the external tools sitebox drives: the
container runtime (CLI or Docker SDK) and git.
"""
