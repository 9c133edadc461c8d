"""Unit targeting engine for mortgage programs.

The installed version is exposed by ``core.version``."""
