"""Workspace orchestration for git-pj."""

from .workspace import Workspace, ScanResult, PullResult

__all__ = ["Workspace", "ScanResult", "PullResult"]
