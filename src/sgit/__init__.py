"""
sgit - git, with a language model riding along.

A drop-in wrapper around the git command line. ``add``, ``commit``, ``diff``,
``log`` and ``merge`` gain AI-assisted modes backed by a chat-completion API;
every other subcommand is handed to git untouched.
"""

__version__ = "0.1.0"
__author__ = "sgit"
