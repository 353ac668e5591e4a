"""
PaperUpdater - keeps a Paper Minecraft server JAR up to date.

This package resolves the newest build of a Paper-family server from the
PaperMC build API, verifies its SHA256 digest and atomically replaces the
local server JAR, recording what was installed.
"""

__version__ = "1.0.0"
__author__ = "dunamismax"
