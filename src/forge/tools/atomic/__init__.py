"""
Atomic tools - the plain operations behind each dispatchable tool name.
"""

from .file_ops import read_file, write_file, edit_file
from .shell import run_shell, ShellOutput
from .search import find_files, search_text, GrepMatch
from .web import fetch_url, web_search, FetchResult, SearchResult
from .ask_user import prompt_user, AskResult

__all__ = [
    "read_file", "write_file", "edit_file",
    "run_shell", "ShellOutput",
    "find_files", "search_text", "GrepMatch",
    "fetch_url", "web_search", "FetchResult", "SearchResult",
    "prompt_user", "AskResult",
]
